"""Core types: results, exit codes and properties.

``branchtag.core.config`` is imported directly; it depends on the version
codec, which itself builds on ``branchtag.core.result``.
"""

from .errors import ErrorCode
from .properties import Properties, PropertyError, resolve_properties
from .result import Err, Ok, Result

__all__ = [
    # errors
    "ErrorCode",
    # properties
    "Properties",
    "PropertyError",
    "resolve_properties",
    # result
    "Err",
    "Ok",
    "Result",
]
