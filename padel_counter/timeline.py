from typing import Dict, Iterable, Iterator, List

import numpy as np

from padel_counter.config import ROSTER_SIZE
from padel_counter.models import MatchState, StatEntry
from padel_counter.score_engine import value_of


def score_matrix(entries: Iterable[StatEntry]) -> np.ndarray:
    """
    Running score of every player after each entry.

    Row 0 is the all-zero baseline; row i holds the scores after the
    first i entries. Shape is (len(entries) + 1, ROSTER_SIZE).
    """
    entries = list(entries)

    deltas = np.zeros((len(entries) + 1, ROSTER_SIZE), dtype=np.int64)
    for row, entry in enumerate(entries, start=1):
        deltas[row, entry.player_index] = value_of(entry.stat)

    return np.cumsum(deltas, axis=0)


def series_keys(state: MatchState) -> List[str]:
    """
    Column key for each player. Falls back to "Player N" before the
    match starts.
    """
    keys = []
    for index in range(ROSTER_SIZE):
        if index < len(state.players) and state.players[index].name:
            keys.append(state.players[index].name)
        else:
            keys.append(f"Player {index + 1}")
    return keys


class ChartSeries:
    """
    Point-by-point score progression for plotting.

    Each iteration replays the event log from scratch, so the series can
    be walked any number of times and always reflects the current log.

    Rows look like ``{"point": 3, "zero": 0, "Ana": 4, "Bea": -1, ...}``.
    Players are keyed by display name; two players sharing a name write
    to the same key and the later one wins.
    """

    def __init__(self, state: MatchState):
        self._state = state

    def __iter__(self) -> Iterator[Dict[str, int]]:
        entries = self._state.event_log.entries
        keys = series_keys(self._state)
        matrix = score_matrix(entries)
        points = [0] + [entry.point for entry in entries]

        for point, scores in zip(points, matrix):
            row: Dict[str, int] = {"point": point, "zero": 0}
            for key, score in zip(keys, scores):
                row[key] = int(score)
            yield row

    def __len__(self) -> int:
        return len(self._state.event_log) + 1

    def points(self) -> List[int]:
        return [row["point"] for row in self]

    def to_list(self) -> List[Dict[str, int]]:
        return list(self)
