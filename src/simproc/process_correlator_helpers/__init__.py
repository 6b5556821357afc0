"""Helper modules for ProcessCorrelator."""

from .background_waiter import run_in_background
from .deadline import WaitDeadline

__all__ = [
    "WaitDeadline",
    "run_in_background",
]
