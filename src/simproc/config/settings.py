"""Environment-backed settings for process correlation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .errors import ConfigurationError
from .runtime import env_seconds, env_str

if TYPE_CHECKING:
    from ..process_models import ToolchainConfiguration

POLL_INTERVAL_ENV = "SIMPROC_POLL_INTERVAL_SECONDS"
WAIT_TIMEOUT_ENV = "SIMPROC_WAIT_TIMEOUT_SECONDS"
TOOLCHAIN_ROOT_ENV = "SIMPROC_TOOLCHAIN_ROOT"

DEFAULT_POLL_INTERVAL_SECONDS = 0.2
DEFAULT_WAIT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class CorrelatorSettings:
    """Polling defaults and the optional toolchain root used for scoping."""

    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    wait_timeout_seconds: float = DEFAULT_WAIT_TIMEOUT_SECONDS
    toolchain_root: Optional[str] = None

    def __post_init__(self) -> None:
        if self.poll_interval_seconds <= 0:
            raise ConfigurationError.invalid_value(
                POLL_INTERVAL_ENV, self.poll_interval_seconds, "Poll interval must be positive"
            )
        if self.wait_timeout_seconds < 0:
            raise ConfigurationError.invalid_value(
                WAIT_TIMEOUT_ENV, self.wait_timeout_seconds, "Timeout must be non-negative"
            )

    @classmethod
    def from_env(cls) -> "CorrelatorSettings":
        poll_interval = env_seconds(POLL_INTERVAL_ENV, or_value=DEFAULT_POLL_INTERVAL_SECONDS)
        wait_timeout = env_seconds(WAIT_TIMEOUT_ENV, or_value=DEFAULT_WAIT_TIMEOUT_SECONDS)
        return cls(
            poll_interval_seconds=float(poll_interval),
            wait_timeout_seconds=float(wait_timeout),
            toolchain_root=env_str(TOOLCHAIN_ROOT_ENV),
        )

    def toolchain(self) -> Optional["ToolchainConfiguration"]:
        """Return the configured toolchain, or None when no root is set."""
        if not self.toolchain_root:
            return None
        from ..process_models import ToolchainConfiguration

        return ToolchainConfiguration(root_path=self.toolchain_root)


__all__ = [
    "CorrelatorSettings",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_WAIT_TIMEOUT_SECONDS",
    "POLL_INTERVAL_ENV",
    "TOOLCHAIN_ROOT_ENV",
    "WAIT_TIMEOUT_ENV",
]
