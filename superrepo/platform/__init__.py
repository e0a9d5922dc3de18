"""Platform abstraction layer."""

from .paths import (
    home,
    user_config_dir,
)
from .process import (
    CommandSpec,
    ProcessResult,
    run,
)

__all__ = [
    # paths
    "home",
    "user_config_dir",
    # process
    "CommandSpec",
    "ProcessResult",
    "run",
]
