"""
Point-in-time enumeration of OS processes.

Every call to :meth:`ProcessSnapshotProvider.snapshot` performs a fresh
``psutil.process_iter()`` pass and returns immutable descriptors. There is no
cache here; callers that poll get an independent view on every call.

Processes that exit mid-scan are skipped. Attributes the OS refuses to reveal
(typically ``environ`` or ``exe`` of another user's process) are left empty on
the descriptor, so predicates fail to match instead of raising. A failure of
the enumeration facility itself surfaces as :class:`EnumerationError`.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

import psutil

from .errors import EnumerationError
from .process_models import ProcessDescriptor
from .process_snapshot_helpers import SNAPSHOT_ATTRIBUTES, build_descriptor

logger = logging.getLogger(__name__)

# Set on every process launched by this toolchain on behalf of a simulator.
IDENTITY_TAG_ENVIRONMENT_KEY = "SIMPROC_SIMULATOR_UDID"


class ProcessSnapshotProvider:
    """Enumerates running processes into ProcessDescriptor tuples."""

    def __init__(self, identity_tag_key: str = IDENTITY_TAG_ENVIRONMENT_KEY):
        self.identity_tag_key = identity_tag_key

    def snapshot(self) -> Tuple[ProcessDescriptor, ...]:
        """Return every process currently visible to this user; order is arbitrary."""
        start_time = time.monotonic()
        descriptors = []
        try:
            for proc in psutil.process_iter(SNAPSHOT_ATTRIBUTES, ad_value=None):
                descriptor = build_descriptor(proc.info, self.identity_tag_key)
                if descriptor is not None:
                    descriptors.append(descriptor)
        except psutil.AccessDenied as exc:
            raise EnumerationError.access_denied(exc) from exc
        except PermissionError as exc:
            raise EnumerationError.access_denied(exc) from exc
        except (psutil.Error, OSError) as exc:
            raise EnumerationError.query_failed(exc) from exc

        logger.debug(
            "Process snapshot completed in %.3fs with %d processes",
            time.monotonic() - start_time,
            len(descriptors),
        )
        return tuple(descriptors)

    def process_for_pid(self, pid: int) -> Optional[ProcessDescriptor]:
        """Describe a single process, or return None when it does not exist."""
        try:
            info = psutil.Process(pid).as_dict(attrs=SNAPSHOT_ATTRIBUTES, ad_value=None)
        except psutil.NoSuchProcess:
            logger.debug("Process %s vanished before inspection", pid)
            return None
        except psutil.AccessDenied as exc:
            raise EnumerationError.access_denied(exc) from exc
        except (psutil.Error, OSError) as exc:
            raise EnumerationError.query_failed(exc) from exc
        return build_descriptor(info, self.identity_tag_key)


__all__ = [
    "IDENTITY_TAG_ENVIRONMENT_KEY",
    "ProcessSnapshotProvider",
]
