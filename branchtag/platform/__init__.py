"""Platform adapters (process execution)."""

from branchtag.platform.process import ProcessError, run, run_silent

__all__ = ["ProcessError", "run", "run_silent"]
