import json
import sys
from collections.abc import Iterable
from typing import Any, TextIO

import yaml

from compose_monitor.errors import SerializationError
from compose_monitor.snapshot import ContainerSnapshot

FORMATS = ("json", "yaml", "text")

# Field order of every report entry
FIELDS = ("id", "image", "names", "status")

# ----------------------------
# Report rendering
# ----------------------------


def snapshot_to_dict(snapshot: ContainerSnapshot) -> dict[str, Any]:
    return {
        "id": snapshot.id,
        "image": snapshot.image,
        "names": list(snapshot.names),
        "status": snapshot.status,
    }


def render_report(log: Iterable[ContainerSnapshot], fmt: str = "json") -> str:
    """
    Serialize an observation log.
    - Entry order is the log order, never sorted
    - Fields appear as id, image, names, status
    - json and yaml are indented for humans and parseable by load_report
    """
    if fmt not in FORMATS:
        raise ValueError(f"unknown report format '{fmt}', expected one of {FORMATS}")

    entries = [snapshot_to_dict(s) for s in log]

    try:
        if fmt == "json":
            return json.dumps(entries, indent=2)
        if fmt == "yaml":
            return yaml.safe_dump(entries, sort_keys=False).rstrip("\n")
    except (TypeError, ValueError, yaml.YAMLError) as e:
        raise SerializationError(f"cannot serialize report: {e}") from e

    # ----------------------------
    # Text output
    # ----------------------------
    if not entries:
        return "No matching containers observed."

    lines = []
    for i, e in enumerate(entries, start=1):
        names = ", ".join(e["names"])
        lines.append(f"{i:>4}  {e['id'][:12]}  {e['image']}  [{names}]  {e['status']}")
    return "\n".join(lines)


def output_result(
    log: Iterable[ContainerSnapshot],
    fmt: str = "json",
    stream: TextIO | None = None,
) -> None:
    out = stream if stream is not None else sys.stdout
    text = render_report(log, fmt)
    try:
        out.write(text)
        out.write("\n")
        out.flush()
    except OSError as e:
        # e.g. BrokenPipeError when piped into `head`
        raise SerializationError(f"cannot write report: {e}") from e


# ----------------------------
# Report parsing
# ----------------------------


def _entry_to_snapshot(entry: Any, index: int) -> ContainerSnapshot:
    if not isinstance(entry, dict):
        raise SerializationError(f"report entry {index} is not a mapping")

    missing = [f for f in FIELDS if f not in entry]
    if missing:
        raise SerializationError(f"report entry {index} missing fields {missing}")

    names = entry["names"]
    if not isinstance(names, list):
        raise SerializationError(f"report entry {index}: 'names' must be a list")

    return ContainerSnapshot(
        id=str(entry["id"]),
        image=str(entry["image"]),
        names=tuple(str(n) for n in names),
        status=str(entry["status"]),
    )


def load_report(text: str, fmt: str = "json") -> list[ContainerSnapshot]:
    try:
        if fmt == "json":
            data = json.loads(text)
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            raise ValueError(f"cannot parse '{fmt}' reports, only json and yaml")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SerializationError(f"malformed {fmt} report: {e}") from e

    # yaml.safe_dump of [] is "[]", but an empty document loads as None
    if data is None:
        data = []
    if not isinstance(data, list):
        raise SerializationError("report must be a list of entries")

    return [_entry_to_snapshot(e, i) for i, e in enumerate(data)]
