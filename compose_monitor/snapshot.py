from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, overload


@dataclass(frozen=True)
class ContainerSnapshot:
    """
    One observation of one live container at one tick.
    Names are kept exactly as the engine reported them.
    """

    id: str
    image: str
    names: tuple[str, ...]
    status: str

    @classmethod
    def from_engine(cls, container: dict[str, Any]) -> "ContainerSnapshot":
        return cls(
            id=container["Id"],
            image=container["Image"],
            names=tuple(container["Names"]),
            status=container["Status"],
        )


class ObservationLog:
    """
    Append-only time series of snapshots.

    The same container seen on several ticks yields several entries;
    nothing is ever collapsed or replaced.
    """

    def __init__(self) -> None:
        self._entries: list[ContainerSnapshot] = []

    def append(self, snapshot: ContainerSnapshot) -> None:
        self._entries.append(snapshot)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ContainerSnapshot]:
        return iter(self._entries)

    @overload
    def __getitem__(self, index: int) -> ContainerSnapshot: ...

    @overload
    def __getitem__(self, index: slice) -> list[ContainerSnapshot]: ...

    def __getitem__(self, index):
        return self._entries[index]

    def __repr__(self) -> str:
        return f"ObservationLog(entries={len(self._entries)})"

    @property
    def entries(self) -> tuple[ContainerSnapshot, ...]:
        return tuple(self._entries)
