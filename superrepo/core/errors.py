"""Error codes for CLI exit status.

Library code reports failures as values; only the CLI layer turns them into
one of these exit codes.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success (including a pull where some repositories failed)
    - 1: User error (bad arguments, unreadable or invalid config)
    - 2: Environment error (git missing, directory not usable)
    - 3: Command failed (git init/add failed, a foreach command exited non-zero)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    COMMAND_FAILED = 3

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
