import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from padel_counter import storage
from padel_counter.config import STORAGE_KEY
from padel_counter.exceptions import (
    EmptyPlayerNameError,
    InvalidFormatError,
    ParseFailureError,
    RosterSizeError,
)
from padel_counter.models import MatchState, PlayerStats, StatEntry, StatKind, TeamStats
from padel_counter.score_engine import ScoreEngine, now_millis
from padel_counter.teams import team_stats
from padel_counter.timeline import ChartSeries

logger = logging.getLogger(__name__)

RESET_PROMPT = "Are you sure you want to reset the match? All statistics will be lost."
IMPORT_PROMPT = "Match data imported successfully! This will overwrite the current match."
INVALID_FORMAT_MESSAGE = "Invalid file format. Please select a valid padel match export file."
PARSE_FAILURE_MESSAGE = "Error reading file. Please make sure it's a valid JSON file."


# ---------------------------------------------------------
# Actions
# ---------------------------------------------------------

@dataclass(frozen=True)
class StartMatch:
    names: Tuple[str, ...]


@dataclass(frozen=True)
class RecordStat:
    player_index: int
    stat: StatKind


@dataclass(frozen=True)
class ResetMatch:
    pass


@dataclass(frozen=True)
class ReplaceState:
    state: MatchState


def _copy_state(state: MatchState) -> MatchState:
    # Players and entries are frozen, so sharing them keeps both states intact
    return MatchState(
        players=list(state.players),
        started=state.started,
        event_log=state.event_log.copy(),
    )


def transition(state: MatchState, action, clock: Callable[[], int] = now_millis) -> MatchState:
    """
    Apply one action and return the next state.
    The given state is never mutated; on error nothing changes.
    """
    if isinstance(action, ReplaceState):
        return _copy_state(action.state)

    next_state = _copy_state(state)
    engine = ScoreEngine(next_state, clock=clock)

    if isinstance(action, StartMatch):
        engine.start(action.names)
    elif isinstance(action, RecordStat):
        engine.record(action.player_index, action.stat)
    elif isinstance(action, ResetMatch):
        engine.reset()
    else:
        raise TypeError(f"Unknown action: {action!r}")

    return next_state


# ---------------------------------------------------------
# Import bookkeeping
# ---------------------------------------------------------

@dataclass(frozen=True)
class ImportTicket:
    token: int


@dataclass(frozen=True)
class ImportResult:
    ok: bool
    message: str = ""
    persisted: bool = False
    stale: bool = False


class MatchSession:
    """
    Single live match.

    Responsibilities:
    - Hold the one MatchState and route every change through transition()
    - Mirror the state into the store after each mutation
    - Gate reset and imported-state persistence behind user confirmation
    - Drop import completions that a newer file selection superseded
    """

    def __init__(self,
                 store,
                 confirm: Optional[Callable[[str], bool]] = None,
                 clock: Callable[[], int] = now_millis,
                 key: str = STORAGE_KEY):
        self._store = store
        self._confirm = confirm or (lambda message: True)
        self._clock = clock
        self._key = key

        self._state = storage.load(store, key)
        self._import_token = 0
        self._completed_token = 0

    # ---------------------------------------------------------
    # State access
    # ---------------------------------------------------------

    @property
    def state(self) -> MatchState:
        return _copy_state(self._state)

    @property
    def started(self) -> bool:
        return self._state.started

    @property
    def players(self) -> List[PlayerStats]:
        return list(self._state.players)

    def team_stats(self, team_index: int) -> TeamStats:
        return team_stats(self._state, team_index)

    def chart_series(self) -> ChartSeries:
        return ChartSeries(self.state)

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    def dispatch(self, action) -> MatchState:
        self._state = transition(self._state, action, clock=self._clock)
        storage.save(self._store, self._state, self._key)
        return self._state

    def start_match(self, names: Sequence[str]) -> bool:
        try:
            self.dispatch(StartMatch(tuple(names)))
        except (EmptyPlayerNameError, RosterSizeError) as e:
            logger.info("Start refused: %s", e)
            return False
        return True

    def record_stat(self, player_index: int, stat: StatKind) -> Optional[StatEntry]:
        """
        Record one stat. Returns None when no match is running.
        """
        if not self._state.started:
            return None

        self.dispatch(RecordStat(player_index, StatKind(stat)))
        return self._state.event_log[-1]

    def reset_match(self) -> bool:
        if not self._confirm(RESET_PROMPT):
            return False

        self.dispatch(ResetMatch())
        logger.info("Match reset")
        return True

    # ---------------------------------------------------------
    # Export / import
    # ---------------------------------------------------------

    def export_match(self, now: Optional[datetime] = None) -> bytes:
        return storage.export_match(self._state, now=now)

    def export_to(self, directory: Path, now: Optional[datetime] = None) -> Path:
        name = storage.export_filename(now)
        path = storage.write_file(directory, name, self.export_match(now))
        logger.info("Exported match to %s", path)
        return path

    def begin_import(self) -> ImportTicket:
        """
        Announce a file read. Only the newest ticket may complete.
        """
        self._import_token += 1
        return ImportTicket(self._import_token)

    def complete_import(self, ticket: ImportTicket, payload: bytes) -> ImportResult:
        if ticket.token != self._import_token or ticket.token <= self._completed_token:
            logger.debug("Ignoring stale import ticket %d", ticket.token)
            return ImportResult(ok=False, stale=True)

        self._completed_token = ticket.token

        try:
            imported = storage.import_match(payload)
        except InvalidFormatError as e:
            logger.warning("Import rejected: %s", e)
            return ImportResult(ok=False, message=INVALID_FORMAT_MESSAGE)
        except ParseFailureError as e:
            logger.warning("Import rejected: %s", e)
            return ImportResult(ok=False, message=PARSE_FAILURE_MESSAGE)

        self._state = transition(self._state, ReplaceState(imported))

        persisted = False
        if self._confirm(IMPORT_PROMPT):
            persisted = storage.save(self._store, self._state, self._key)

        logger.info("Imported match (%d events, persisted=%s)", len(self._state.event_log), persisted)
        return ImportResult(ok=True, message=IMPORT_PROMPT, persisted=persisted)

    def import_file(self, path: Path) -> ImportResult:
        ticket = self.begin_import()
        return self.complete_import(ticket, storage.read_file(path))
