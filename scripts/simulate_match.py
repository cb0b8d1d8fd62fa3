# scripts/simulate_match.py
from __future__ import annotations

import argparse
import random
from pathlib import Path

from padel_counter.match_session import MatchSession
from padel_counter.models import StatKind
from padel_counter.storage import MemoryStore


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--points", type=int, default=60)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--names", nargs=4, default=["Ana", "Bea", "Cris", "Dani"])
    ap.add_argument("--out", type=str, default="matches")
    args = ap.parse_args()

    rng = random.Random(args.seed)
    session = MatchSession(MemoryStore())
    session.start_match(args.names)

    for _ in range(args.points):
        # winners are rarer than unforced errors
        stat = StatKind.WINNERS if rng.random() < 0.4 else StatKind.UNFORCED_ERRORS
        session.record_stat(rng.randrange(4), stat)

    for team_index in (0, 1):
        print(f"Team {team_index + 1}: {session.team_stats(team_index)}")

    path = session.export_to(Path(args.out))
    print(f"Saved match: {path}")


if __name__ == "__main__":
    main()
