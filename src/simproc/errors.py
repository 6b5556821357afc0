"""Error types raised while observing OS processes."""

from __future__ import annotations


class EnumerationError(RuntimeError):
    """Raised when the OS process list cannot be queried."""

    @classmethod
    def access_denied(cls, cause: BaseException) -> "EnumerationError":
        """Create error for a permission failure while listing processes."""
        return cls(f"Permission denied while enumerating processes: {cause}")

    @classmethod
    def query_failed(cls, cause: BaseException) -> "EnumerationError":
        """Create error for any other failure of the process listing facility."""
        return cls(f"Process enumeration failed: {cause}")


__all__ = ["EnumerationError"]
