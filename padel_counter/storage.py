import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from padel_counter.config import EXPORT_PREFIX, ROSTER_SIZE, SCHEMA_VERSION, STORAGE_KEY
from padel_counter.exceptions import InvalidFormatError, ParseFailureError
from padel_counter.models import EventLog, MatchState, PlayerStats, StatEntry, StatKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# Key-value stores
# ---------------------------------------------------------

class MemoryStore:
    """In-process store, handy for tests and one-off sessions."""

    def __init__(self):
        self._data: Dict[str, bytes] = {}

    def load(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def save(self, key: str, payload: bytes):
        self._data[key] = bytes(payload)

    def clear(self, key: str):
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class DirectoryStore:
    """
    One JSON file per key inside ``root``.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def load(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def save(self, key: str, payload: bytes):
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self._path(key), "wb") as f:
            f.write(payload)

    def clear(self, key: str):
        path = self._path(key)
        if path.exists():
            path.unlink()

    def __contains__(self, key: str) -> bool:
        return self._path(key).exists()


# ---------------------------------------------------------
# State codec
# ---------------------------------------------------------

def state_to_dict(state: MatchState) -> Dict[str, Any]:
    return {
        "players": [
            {
                "name": p.name,
                "winners": p.winners,
                "unforced_errors": p.unforced_errors,
                "score": p.score,
            }
            for p in state.players
        ],
        "isGameStarted": state.started,
        "statHistory": [
            {
                "point": e.point,
                "playerIndex": e.player_index,
                "stat": e.stat.value,
                "timestamp": e.timestamp,
            }
            for e in state.event_log
        ],
    }


def state_from_dict(data: Dict[str, Any]) -> MatchState:
    history = data.get("statHistory")
    if history is None:
        history = data.get("eventLog", [])

    players = [
        PlayerStats(
            name=str(p["name"]),
            winners=int(p["winners"]),
            unforced_errors=int(p["unforced_errors"]),
            score=int(p["score"]),
        )
        for p in data["players"]
    ]

    entries = [
        StatEntry(
            point=int(e["point"]),
            player_index=int(e["playerIndex"]),
            stat=StatKind(e["stat"]),
            timestamp=int(e["timestamp"]),
        )
        for e in history
    ]

    return MatchState(
        players=players,
        started=bool(data.get("isGameStarted", bool(players))),
        event_log=EventLog.from_entries(entries),
    )


def dump_state(state: MatchState) -> bytes:
    return json.dumps(state_to_dict(state)).encode("utf-8")


def load_state(payload: bytes) -> MatchState:
    # Written by dump_state, so taken as-is
    return state_from_dict(json.loads(payload.decode("utf-8")))


# ---------------------------------------------------------
# Durable store mirror
# ---------------------------------------------------------

def save(store, state: MatchState, key: str = STORAGE_KEY) -> bool:
    """
    Mirror the whole state into the store. A match that has not
    started is stored as an absent key.

    Returns True when a payload was written.
    """
    if not state.started:
        store.clear(key)
        return False

    store.save(key, dump_state(state))
    return True


def load(store, key: str = STORAGE_KEY) -> MatchState:
    payload = store.load(key)
    if payload is None:
        return MatchState()
    return load_state(payload)


# ---------------------------------------------------------
# Export / import
# ---------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def export_match(state: MatchState, now: Optional[datetime] = None) -> bytes:
    now = now or _utcnow()

    data = {
        "matchState": state_to_dict(state),
        "timestamp": now.isoformat(),
        "version": SCHEMA_VERSION,
    }
    return json.dumps(data, indent=2).encode("utf-8")


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or _utcnow()
    return f"{EXPORT_PREFIX}-match-{now.date().isoformat()}.json"


def import_match(payload: bytes) -> MatchState:
    """
    Decode an exported match.

    Raises ParseFailureError when the bytes are not JSON and
    InvalidFormatError when the document lacks the match shape.
    Nothing is returned unless the whole state decodes.
    """
    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseFailureError(f"Cannot parse match file: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("matchState"), dict):
        raise InvalidFormatError("Missing field: matchState")

    match_data = data["matchState"]

    if match_data.get("players") is None:
        raise InvalidFormatError("Missing field: matchState.players")

    history = match_data.get("statHistory", match_data.get("eventLog"))
    if not isinstance(history, list):
        raise InvalidFormatError("statHistory must be list")

    if not isinstance(match_data.get("isGameStarted", False), bool):
        raise InvalidFormatError("isGameStarted must be true or false")

    try:
        state = state_from_dict(match_data)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidFormatError(f"Invalid match data: {e}") from e

    if state.started and len(state.players) != ROSTER_SIZE:
        raise InvalidFormatError(f"players must contain exactly {ROSTER_SIZE} entries")

    if not state.started and (state.players or len(state.event_log)):
        raise InvalidFormatError("A match that has not started cannot hold players or stats")

    for entry in state.event_log:
        if not 0 <= entry.player_index < ROSTER_SIZE:
            raise InvalidFormatError(f"playerIndex out of range: {entry.player_index}")

    version = data.get("version")
    if version != SCHEMA_VERSION:
        logger.warning("Importing match with version %r (expected %s)", version, SCHEMA_VERSION)

    return state


# ---------------------------------------------------------
# Files
# ---------------------------------------------------------

def write_file(directory: Path, name: str, payload: bytes) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / name
    with open(path, "wb") as f:
        f.write(payload)
    return path


def read_file(path: Path) -> bytes:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Match file not found: {path}")

    with open(path, "rb") as f:
        return f.read()
