from padel_counter.config import TEAMS
from padel_counter.exceptions import BoundsError
from padel_counter.models import MatchState, TeamStats


def team_stats(state: MatchState, team_index: int) -> TeamStats:
    """
    Sum the stats of one fixed pair: team 0 is players 0 and 1,
    team 1 is players 2 and 3.

    Before the match starts every team reads all zero, whatever the index.
    """
    if not state.started:
        return TeamStats()

    if team_index not in range(len(TEAMS)):
        raise BoundsError(f"team_index out of range: {team_index}")

    members = [state.players[i] for i in TEAMS[team_index]]

    return TeamStats(
        winners=sum(p.winners for p in members),
        unforced_errors=sum(p.unforced_errors for p in members),
        score=sum(p.score for p in members),
    )
