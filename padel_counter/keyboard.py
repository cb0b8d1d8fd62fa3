from typing import Dict, Optional, Tuple

from padel_counter.models import StatEntry, StatKind

KEY_MAP: Dict[str, Tuple[int, StatKind]] = {
    "1": (0, StatKind.WINNERS),
    "2": (0, StatKind.UNFORCED_ERRORS),
    "3": (1, StatKind.WINNERS),
    "4": (1, StatKind.UNFORCED_ERRORS),
    "5": (2, StatKind.WINNERS),
    "6": (2, StatKind.UNFORCED_ERRORS),
    "7": (3, StatKind.WINNERS),
    "8": (3, StatKind.UNFORCED_ERRORS),
}


def handle_key(session, key: str) -> Optional[StatEntry]:
    """Inert for unmapped keys and before the match starts."""
    if not session.started or key not in KEY_MAP:
        return None

    player_index, stat = KEY_MAP[key]
    return session.record_stat(player_index, stat)
