"""Immutable records describing processes, simulators and lookup outcomes."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple, Union

_EMPTY_ENVIRONMENT: Mapping[str, str] = MappingProxyType({})


def path_is_under(path: Optional[str], root: str) -> bool:
    """Return True when *path* equals *root* or sits beneath it, segment-wise.

    Both sides are normalized first, so ``..`` segments cannot climb out of *root*.
    """
    if not path or not root:
        return False
    try:
        PurePosixPath(posixpath.normpath(path)).relative_to(PurePosixPath(posixpath.normpath(root)))
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class ProcessDescriptor:
    """Snapshot of one OS process at enumeration time."""

    pid: int
    name: str
    launch_path: Optional[str] = None
    ppid: Optional[int] = None
    environment: Mapping[str, str] = field(default_factory=lambda: _EMPTY_ENVIRONMENT, compare=False)
    arguments: Tuple[str, ...] = ()
    identity_tag: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.environment, MappingProxyType):
            object.__setattr__(self, "environment", MappingProxyType(dict(self.environment)))
        if not isinstance(self.arguments, tuple):
            object.__setattr__(self, "arguments", tuple(self.arguments))


@dataclass(frozen=True)
class SimulatorIdentity:
    """Simulator device handle and its private data directory."""

    udid: str
    data_directory: Optional[str] = None


@dataclass(frozen=True)
class ToolchainConfiguration:
    """Installation root of one toolchain version."""

    root_path: str

    def contains(self, path: Optional[str]) -> bool:
        return path_is_under(path, self.root_path)


@dataclass(frozen=True)
class BinaryDescriptor:
    """Identity of an executable: its on-disk path, name and architectures."""

    path: str
    name: Optional[str] = None
    architectures: frozenset = frozenset()

    @property
    def executable_name(self) -> str:
        return self.name or PurePosixPath(self.path).name

    @property
    def bundle_name(self) -> str:
        """Name of the enclosing ``.app`` directory, or the parent directory."""
        path = PurePosixPath(self.path)
        for part in reversed(path.parts[:-1]):
            if part.endswith(".app"):
                return part
        return path.parent.name

    @property
    def relocated_suffix(self) -> str:
        """Trailing segments, from the bundle directory down, that survive installation."""
        path = PurePosixPath(self.path)
        parts = path.parts
        for index in range(len(parts) - 2, -1, -1):
            if parts[index].endswith(".app"):
                return "/".join(parts[index:])
        if not path.parent.name:
            return path.name
        return f"{path.parent.name}/{path.name}"


@dataclass(frozen=True)
class ProcessMatch:
    """At least one process matched; ``process`` is the first in snapshot order."""

    process: ProcessDescriptor
    candidates: Tuple[ProcessDescriptor, ...]

    @classmethod
    def from_candidates(cls, candidates: Sequence[ProcessDescriptor]) -> "ProcessMatch":
        if not candidates:
            raise ValueError("ProcessMatch requires at least one candidate")
        return cls(process=candidates[0], candidates=tuple(candidates))

    @property
    def is_ambiguous(self) -> bool:
        return len(self.candidates) > 1

    def most_recent(self) -> ProcessDescriptor:
        """Candidate with the highest pid; a heuristic, since pids can wrap."""
        return max(self.candidates, key=lambda process: process.pid)

    def with_parent(self, ppid: int) -> Optional[ProcessDescriptor]:
        for process in self.candidates:
            if process.ppid == ppid:
                return process
        return None


@dataclass(frozen=True)
class NotFound:
    """Immediate lookup found no matching process."""

    description: str


@dataclass(frozen=True)
class Timeout:
    """Bounded wait reached its deadline without a match."""

    description: str
    elapsed_seconds: float
    polls: int


LookupOutcome = Union[ProcessMatch, NotFound]
WaitOutcome = Union[ProcessMatch, Timeout]


__all__ = [
    "BinaryDescriptor",
    "LookupOutcome",
    "NotFound",
    "ProcessDescriptor",
    "ProcessMatch",
    "SimulatorIdentity",
    "Timeout",
    "ToolchainConfiguration",
    "WaitOutcome",
    "path_is_under",
]
