"""
Composable matching predicates over ProcessDescriptor.

A :class:`Predicate` wraps a pure function from descriptor to bool together
with a readable description used in log lines and lookup outcomes. Predicates
combine with ``&``, ``|`` and ``~`` (or :func:`all_of` / :func:`any_of`) and
never raise: any field that is absent on a descriptor simply fails the match.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Iterable, List, Optional

from .process_models import (
    BinaryDescriptor,
    ProcessDescriptor,
    ToolchainConfiguration,
    path_is_under,
)


@dataclass(frozen=True)
class Predicate:
    """Immutable, stateless test over a single process descriptor."""

    test: Callable[[ProcessDescriptor], bool]
    description: str

    def __call__(self, process: ProcessDescriptor) -> bool:
        return bool(self.test(process))

    def __and__(self, other: "Predicate") -> "Predicate":
        return all_of(self, other)

    def __or__(self, other: "Predicate") -> "Predicate":
        return any_of(self, other)

    def __invert__(self) -> "Predicate":
        inner = self
        return Predicate(lambda process: not inner(process), f"not ({inner.description})")

    def __str__(self) -> str:
        return self.description


def all_of(*predicates: Predicate) -> Predicate:
    """Match when every predicate matches; an empty conjunction matches everything."""
    members = tuple(predicates)
    description = " and ".join(f"({p.description})" for p in members) or "any process"
    return Predicate(lambda process: all(p(process) for p in members), description)


def any_of(*predicates: Predicate) -> Predicate:
    """Match when at least one predicate matches; an empty disjunction matches nothing."""
    members = tuple(predicates)
    description = " or ".join(f"({p.description})" for p in members) or "no process"
    return Predicate(lambda process: any(p(process) for p in members), description)


def launch_path_equals(launch_path: str) -> Predicate:
    return Predicate(
        lambda process: process.launch_path is not None and process.launch_path == launch_path,
        f"launch path is {launch_path}",
    )


def process_name_equals(name: str) -> Predicate:
    """Match the process name, falling back to the launch path's final segment.

    Kernel process names can be truncated, so the executable file name is the
    authoritative spelling when available.
    """

    def _test(process: ProcessDescriptor) -> bool:
        if process.name == name:
            return True
        if not process.launch_path:
            return False
        return PurePosixPath(process.launch_path).name == name

    return Predicate(_test, f"process named {name}")


def binary_matches(
    binary: BinaryDescriptor,
    data_directory: Optional[str] = None,
    udids: Iterable[str] = (),
) -> Predicate:
    """
    Match the process running *binary*, before or after installation.

    Installing an application moves its bundle into simulator-private storage,
    so the running process reports ``<data_directory>/.../<bundle>/<executable>``
    rather than the path used to request the launch. Both forms match. A
    relocated path must sit under *data_directory* when one is given; otherwise
    one of its segments must equal one of *udids*. With neither, only the
    original path matches.
    """
    original_path = binary.path
    suffix_parts = PurePosixPath(binary.relocated_suffix).parts
    wanted = frozenset(udids)

    def _test(process: ProcessDescriptor) -> bool:
        launch_path = process.launch_path
        if not launch_path:
            return False
        if launch_path == original_path:
            return True
        parts = PurePosixPath(launch_path).parts
        if len(parts) <= len(suffix_parts) or parts[-len(suffix_parts) :] != suffix_parts:
            return False
        if data_directory is not None:
            return path_is_under(launch_path, data_directory)
        return any(part in wanted for part in parts)

    if data_directory:
        scope = f" under {data_directory}"
    elif wanted:
        scope = f" for {sorted(wanted)}"
    else:
        scope = ""
    return Predicate(_test, f"binary {original_path} or relocated {binary.relocated_suffix}{scope}")


def identity_tag_in(udids: Iterable[str]) -> Predicate:
    """Match processes stamped at launch with one of *udids*."""
    wanted = frozenset(udids)
    return Predicate(
        lambda process: process.identity_tag is not None and process.identity_tag in wanted,
        f"identity tag in {sorted(wanted)}",
    )


def has_identity_tag() -> Predicate:
    """Match every process launched by this toolchain, whatever its simulator."""
    return Predicate(lambda process: bool(process.identity_tag), "carries an identity tag")


def udid_in_launch_path(udids: Iterable[str]) -> Predicate:
    """Match processes whose launch path has a segment equal to one of *udids*."""
    wanted = frozenset(udids)

    def _test(process: ProcessDescriptor) -> bool:
        if not process.launch_path:
            return False
        return any(part in wanted for part in PurePosixPath(process.launch_path).parts)

    return Predicate(_test, f"launch path contains one of {sorted(wanted)}")


def under_toolchain(configuration: ToolchainConfiguration) -> Predicate:
    return Predicate(
        lambda process: configuration.contains(process.launch_path),
        f"launched from toolchain {configuration.root_path}",
    )


def parent_pid_equals(ppid: int) -> Predicate:
    return Predicate(lambda process: process.ppid == ppid, f"parent pid is {ppid}")


def filter_processes(processes: Iterable[ProcessDescriptor], predicate: Predicate) -> List[ProcessDescriptor]:
    """Return the matching descriptors in their original order."""
    return [process for process in processes if predicate(process)]


__all__ = [
    "Predicate",
    "all_of",
    "any_of",
    "binary_matches",
    "filter_processes",
    "has_identity_tag",
    "identity_tag_in",
    "launch_path_equals",
    "parent_pid_equals",
    "process_name_equals",
    "udid_in_launch_path",
    "under_toolchain",
]
