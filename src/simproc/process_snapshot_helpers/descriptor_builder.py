"""Normalize raw psutil payloads into ProcessDescriptor records."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..process_models import ProcessDescriptor

SNAPSHOT_ATTRIBUTES = ["pid", "name", "exe", "ppid", "environ", "cmdline"]


def build_descriptor(info: Mapping[str, Any], identity_tag_key: str) -> Optional[ProcessDescriptor]:
    """
    Convert a ``proc.info`` style mapping into a descriptor.

    Attributes psutil could not read arrive as ``None`` and stay absent on the
    descriptor. Returns None when the payload has no usable pid.
    """
    pid = _coerce_int(info.get("pid"))
    if pid is None:
        return None

    environment = _string_mapping(info.get("environ"))
    arguments = _string_tuple(info.get("cmdline"))
    launch_path = _launch_path(info.get("exe"), arguments)

    name_value = info.get("name")
    name = str(name_value) if name_value else ""

    return ProcessDescriptor(
        pid=pid,
        name=name,
        launch_path=launch_path,
        ppid=_coerce_int(info.get("ppid")),
        environment=environment,
        arguments=arguments,
        identity_tag=environment.get(identity_tag_key),
    )


def _launch_path(exe_value: Any, arguments: tuple[str, ...]) -> Optional[str]:
    if isinstance(exe_value, str) and exe_value:
        return exe_value
    # exe can be unreadable while argv[0] still carries an absolute path
    if arguments and arguments[0].startswith("/"):
        return arguments[0]
    return None


def _coerce_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _string_mapping(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(key): str(item) for key, item in value.items()}


def _string_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(arg) for arg in value)
