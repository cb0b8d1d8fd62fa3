import argparse
import logging
from pathlib import Path

from padel_counter.config import MATCHES_DIR
from padel_counter.keyboard import handle_key
from padel_counter.match_session import MatchSession
from padel_counter.models import StatKind
from padel_counter.storage import DirectoryStore


def make_confirm(assume_yes: bool):
    def confirm(message: str) -> bool:
        if assume_yes:
            return True
        answer = input(f"{message} [y/N] ")
        return answer.strip().lower() in ("y", "yes")
    return confirm


def print_scoreboard(session: MatchSession):
    if not session.started:
        print("No match in progress.")
        return

    print("==========================")
    for team_index in (0, 1):
        team = session.team_stats(team_index)
        print(f"Team {team_index + 1}: score {team.score} "
              f"(W {team.winners} / UE {team.unforced_errors})")

        for player in session.players[team_index * 2:team_index * 2 + 2]:
            print(f"  {player.name}: {player.score} "
                  f"(W {player.winners} / UE {player.unforced_errors})")
    print("==========================")


def print_chart(session: MatchSession):
    for row in session.chart_series():
        values = ", ".join(f"{k}={v}" for k, v in row.items() if k not in ("point", "zero"))
        print(f"{row['point']:>4}: {values}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Padel match counter")
    ap.add_argument("--data-dir", type=str, default=str(MATCHES_DIR))
    ap.add_argument("--yes", action="store_true", help="Answer yes to confirmations")
    ap.add_argument("--verbose", action="store_true")

    sub = ap.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="Start a match with four players")
    start.add_argument("names", nargs=4)

    key = sub.add_parser("key", help="Record stats by shortcut keys 1-8")
    key.add_argument("keys", nargs="+")

    winner = sub.add_parser("winner", help="Record a winner")
    winner.add_argument("player", type=int, help="Player number 1-4")

    error = sub.add_parser("error", help="Record an unforced error")
    error.add_argument("player", type=int, help="Player number 1-4")

    sub.add_parser("show", help="Print the scoreboard")
    sub.add_parser("chart", help="Print the score progression")

    export = sub.add_parser("export", help="Export the match to a JSON file")
    export.add_argument("--out", type=str, default=".")

    imp = sub.add_parser("import", help="Import a match from a JSON file")
    imp.add_argument("file", type=str)

    sub.add_parser("reset", help="Reset the match")

    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    session = MatchSession(
        DirectoryStore(Path(args.data_dir)),
        confirm=make_confirm(args.yes),
    )

    if args.command == "start":
        if not session.start_match(args.names):
            print("❌ ERROR: every player needs a name")
            return 1
        print_scoreboard(session)

    elif args.command == "key":
        if not session.started:
            print("❌ ERROR: start a match first")
            return 1
        for k in args.keys:
            handle_key(session, k)
        print_scoreboard(session)

    elif args.command in ("winner", "error"):
        if not 1 <= args.player <= 4:
            print("❌ ERROR: player must be 1-4")
            return 1
        stat = StatKind.WINNERS if args.command == "winner" else StatKind.UNFORCED_ERRORS
        if session.record_stat(args.player - 1, stat) is None:
            print("❌ ERROR: start a match first")
            return 1
        print_scoreboard(session)

    elif args.command == "show":
        print_scoreboard(session)

    elif args.command == "chart":
        print_chart(session)

    elif args.command == "export":
        path = session.export_to(Path(args.out))
        print(f"Saved match: {path}")

    elif args.command == "import":
        try:
            result = session.import_file(Path(args.file))
        except FileNotFoundError as e:
            print("❌ ERROR:", e)
            return 1
        print(result.message)
        if not result.ok:
            return 1
        print_scoreboard(session)

    elif args.command == "reset":
        if session.reset_match():
            print("Match reset.")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
