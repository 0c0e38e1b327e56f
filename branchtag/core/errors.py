"""Exit codes for the branchtag CLI.

Each failure category surfaced by a command maps to one stable process exit
code so CI pipelines can tell a bad version string from a failing git call.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    - 0: Success
    - 1: User error (bad option, unknown specifier)
    - 2: Config error (unreadable or invalid branchtag.toml)
    - 3: Version error (malformed version text, digit overflow)
    - 4: VCS error (git command failed, nothing found by a history walk)
    - 5: Task error (a dependent task exited non-zero)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    VERSION_ERROR = 3
    VCS_ERROR = 4
    TASK_ERROR = 5
