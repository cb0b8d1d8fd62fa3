from dataclasses import dataclass, field
from typing import List

from padel_counter.event_log import EventLog, StatEntry, StatKind

__all__ = [
    "EventLog",
    "MatchState",
    "PlayerStats",
    "StatEntry",
    "StatKind",
    "TeamStats",
]


@dataclass(frozen=True)
class PlayerStats:
    name: str
    winners: int = 0
    unforced_errors: int = 0
    score: int = 0


@dataclass
class MatchState:
    players: List[PlayerStats] = field(default_factory=list)
    started: bool = False
    event_log: EventLog = field(default_factory=EventLog)


@dataclass(frozen=True)
class TeamStats:
    winners: int = 0
    unforced_errors: int = 0
    score: int = 0
