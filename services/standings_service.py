"""
Group-stage standings and semifinal qualification.

Pure computation over a snapshot of groups, teams, rounds and matches; the
database is only touched by `load_standings`.
"""
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from models.group import Group
from models.match import Match, MatchStatus
from models.round import Round, RoundType
from models.team import Team
from schemas.tournament import (
    GroupStandings, Qualifier, StandingRow, StandingsResponse
)

SEMIFINAL_QUALIFIERS = 4
UNKNOWN_GROUP = ""


class StandingsTable:
    """Ordered standings per group name plus the seeded qualifier list."""

    def __init__(self, groups: Dict[str, List[StandingRow]], qualifiers: List[StandingRow]):
        self.groups = groups
        self.qualifiers = qualifiers

    @property
    def qualifier_ids(self) -> List[int]:
        return [q.team_id for q in self.qualifiers]

    @property
    def ready_for_semifinals(self) -> bool:
        return len(self.qualifiers) >= SEMIFINAL_QUALIFIERS

    def to_response(self) -> StandingsResponse:
        return StandingsResponse(
            groups=[GroupStandings(name=name, standings=rows) for name, rows in self.groups.items()],
            qualifiers=[
                Qualifier(seed=seed, team_id=row.team_id, name=row.name, group=row.group)
                for seed, row in enumerate(self.qualifiers, start=1)
            ],
            ready_for_semifinals=self.ready_for_semifinals,
        )


def is_group_stage_result(match, rounds_by_id: Dict[int, Round]) -> bool:
    """Finished match of a group round (or of a round with no type)."""
    if match.status != MatchStatus.FINISHED:
        return False
    round_obj = rounds_by_id.get(match.round_id)
    round_type = round_obj.type if round_obj is not None else None
    return round_type is None or round_type == RoundType.GROUP


def _record(standing: StandingRow, scored: int, conceded: int):
    standing.played += 1
    standing.points_for += scored
    standing.points_against += conceded
    if scored > conceded:
        standing.wins += 1
    elif scored < conceded:
        standing.losses += 1
    standing.diff = standing.points_for - standing.points_against
    standing.ppg = standing.points_for / standing.played if standing.played > 0 else 0


def sort_key(standing: StandingRow):
    # wins, then point difference, then points per game; sorted() keeps input order on full ties
    return (-standing.wins, -standing.diff, -standing.ppg)


def select_qualifiers(groups: Dict[str, List[StandingRow]]) -> List[StandingRow]:
    """Every group winner, then the runner-up with the best points per game."""
    tops = [rows[0] for rows in groups.values() if rows]
    seconds = [rows[1] for rows in groups.values() if len(rows) > 1]
    # max() returns the first of equal candidates
    best_second = max(seconds, key=lambda s: s.ppg) if seconds else None
    return [s for s in tops + [best_second] if s]


def compute_standings(groups: Iterable, teams: Iterable, matches: Iterable,
                      rounds: Optional[Iterable] = None) -> StandingsTable:
    groups = list(groups)
    group_names = {g.id: g.name for g in groups}
    rounds_by_id = {r.id: r for r in (rounds or [])}

    table: Dict[str, List[StandingRow]] = {g.name: [] for g in groups}
    by_team: Dict[int, StandingRow] = {}

    for team in teams:
        if team.group_id is None:
            continue
        group_name = group_names.get(team.group_id, UNKNOWN_GROUP)
        standing = StandingRow(
            team_id=team.id, name=team.name, group=group_name,
            played=0, wins=0, losses=0, points_for=0, points_against=0, diff=0, ppg=0.0,
        )
        table.setdefault(group_name, []).append(standing)
        by_team[team.id] = standing

    for match in matches:
        if not is_group_stage_result(match, rounds_by_id):
            continue
        first = by_team.get(match.team1_id)
        second = by_team.get(match.team2_id)
        if first is None or second is None:
            continue
        _record(first, match.score1, match.score2)
        _record(second, match.score2, match.score1)

    ordered = {name: sorted(rows, key=sort_key) for name, rows in table.items()}
    return StandingsTable(ordered, select_qualifiers(ordered))


def load_standings(db: Session) -> StandingsTable:
    """Compute standings from the current store snapshot."""
    groups = db.query(Group).order_by(Group.id).all()
    teams = db.query(Team).order_by(Team.id).all()
    rounds = db.query(Round).all()
    matches = db.query(Match).filter(
        Match.status == MatchStatus.FINISHED
    ).order_by(Match.id).all()
    return compute_standings(groups, teams, matches, rounds)
