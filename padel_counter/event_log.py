from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Tuple

from padel_counter.config import ROSTER_SIZE
from padel_counter.exceptions import BoundsError


class StatKind(str, Enum):
    WINNERS = "winners"
    UNFORCED_ERRORS = "unforced_errors"


@dataclass(frozen=True)
class StatEntry:
    point: int
    player_index: int
    stat: StatKind
    timestamp: int  # epoch milliseconds


class EventLog:
    """
    Append-only, ordered record of scoring events.

    Source of truth for every derived score. Entries are numbered 1..N
    in insertion order with no gaps; prior entries are never touched.
    """

    def __init__(self):
        self._entries: List[StatEntry] = []

    @classmethod
    def from_entries(cls, entries: Iterable[StatEntry]) -> "EventLog":
        log = cls()
        log._entries = list(entries)
        return log

    def append(self, player_index: int, stat: StatKind, timestamp: int) -> StatEntry:
        if not 0 <= player_index < ROSTER_SIZE:
            raise BoundsError(f"player_index out of range: {player_index}")

        entry = StatEntry(
            point=len(self._entries) + 1,
            player_index=player_index,
            stat=StatKind(stat),
            timestamp=timestamp,
        )
        self._entries.append(entry)
        return entry

    def clear(self):
        self._entries = []

    def copy(self) -> "EventLog":
        """Independent log sharing the (immutable) entries."""
        return EventLog.from_entries(self._entries)

    @property
    def entries(self) -> Tuple[StatEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StatEntry]:
        return iter(tuple(self._entries))

    def __getitem__(self, index):
        return self._entries[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, EventLog):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"EventLog({self._entries!r})"
