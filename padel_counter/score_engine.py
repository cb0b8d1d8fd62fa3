import logging
import time
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Sequence

from padel_counter.config import ROSTER_SIZE, STAT_VALUES
from padel_counter.exceptions import (
    BoundsError,
    EmptyPlayerNameError,
    MatchNotStartedError,
    RosterSizeError,
)
from padel_counter.models import MatchState, PlayerStats, StatEntry, StatKind

logger = logging.getLogger(__name__)


def now_millis() -> int:
    return int(time.time() * 1000)


def value_of(stat: StatKind) -> int:
    return STAT_VALUES[StatKind(stat).value]


def apply_event(players: Sequence[PlayerStats], entry: StatEntry) -> List[PlayerStats]:
    """
    Return a new roster with ``entry`` applied to its player.

    Untouched players are carried over as the same objects.
    """
    if not 0 <= entry.player_index < len(players):
        raise BoundsError(f"player_index out of range: {entry.player_index}")

    updated = list(players)
    player = updated[entry.player_index]

    if entry.stat == StatKind.WINNERS:
        player = replace(player, winners=player.winners + 1)
    else:
        player = replace(player, unforced_errors=player.unforced_errors + 1)

    updated[entry.player_index] = replace(player, score=player.score + value_of(entry.stat))
    return updated


def empty_roster(names: Optional[Sequence[str]] = None) -> List[PlayerStats]:
    if names is None:
        names = [f"Player {i + 1}" for i in range(ROSTER_SIZE)]
    return [PlayerStats(name=name) for name in names]


def project_all(entries: Iterable[StatEntry],
                names: Optional[Sequence[str]] = None) -> List[PlayerStats]:
    """Fold every entry onto an all-zero roster."""
    players = empty_roster(names)
    for entry in entries:
        players = apply_event(players, entry)
    return players


class ScoreEngine:
    """
    Match state engine.

    Responsibilities:
    - Start a match with four named players
    - Append stat entries and apply each exactly once
    - Keep players consistent with the event log
    """

    def __init__(self, state: MatchState, clock: Callable[[], int] = now_millis):
        self.state = state
        self._clock = clock

    # =========================================================
    # PUBLIC API
    # =========================================================

    def start(self, names: Sequence[str]) -> MatchState:
        cleaned = self._validate_names(names)

        self.state.players = empty_roster(cleaned)
        self.state.started = True
        self.state.event_log.clear()

        logger.info("Match started: %s", ", ".join(cleaned))
        return self.state

    def record(self, player_index: int, stat: StatKind) -> StatEntry:
        if not self.state.started:
            raise MatchNotStartedError("Match has not started")

        entry = self.state.event_log.append(player_index, stat, self._clock())
        self.state.players = apply_event(self.state.players, entry)

        logger.debug(
            "Point %d: player %d %s",
            entry.point, entry.player_index, entry.stat.value,
        )
        return entry

    def reset(self) -> MatchState:
        self.state.players = []
        self.state.started = False
        self.state.event_log.clear()
        return self.state

    # =========================================================
    # VALIDATION
    # =========================================================

    @staticmethod
    def _validate_names(names: Sequence[str]) -> List[str]:
        if len(names) != ROSTER_SIZE:
            raise RosterSizeError(f"Expected {ROSTER_SIZE} players, got {len(names)}")

        cleaned = [str(name).strip() for name in names]

        for index, name in enumerate(cleaned):
            if not name:
                raise EmptyPlayerNameError(f"Player {index + 1} has no name")

        return cleaned
