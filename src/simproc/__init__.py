"""Correlate OS processes with the simulators they belong to."""

from .errors import EnumerationError
from .predicates import Predicate, filter_processes
from .process_correlator import ProcessCorrelator
from .process_models import (
    BinaryDescriptor,
    NotFound,
    ProcessDescriptor,
    ProcessMatch,
    SimulatorIdentity,
    Timeout,
    ToolchainConfiguration,
)
from .process_snapshot import IDENTITY_TAG_ENVIRONMENT_KEY, ProcessSnapshotProvider
from .simulator_processes import SimulatorProcessFetcher

__all__ = [
    "BinaryDescriptor",
    "EnumerationError",
    "IDENTITY_TAG_ENVIRONMENT_KEY",
    "NotFound",
    "Predicate",
    "ProcessCorrelator",
    "ProcessDescriptor",
    "ProcessMatch",
    "ProcessSnapshotProvider",
    "SimulatorIdentity",
    "SimulatorProcessFetcher",
    "Timeout",
    "ToolchainConfiguration",
    "filter_processes",
]
