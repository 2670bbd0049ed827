#!/usr/bin/env python3
"""
Seed a demo tournament: two groups of three teams and one finished group round
per pairing, so standings and qualifiers can be inspected right away.
Run with: PYTHONPATH=. python3 scripts/seed_demo.py
"""
from db import Base, SessionLocal, engine
from api.crud.group_crud import create_group
from api.crud.match_crud import create_match
from api.crud.round_crud import create_round, next_round_number
from api.crud.team_crud import create_team
from schemas.tournament import GroupCreate, MatchCreate, RoundCreate, TeamCreate
from services.round_lifecycle import finish_round, start_round
from services.standings_service import load_standings

GROUPS = {
    "A": ["T1", "T2", "T3"],
    "B": ["T4", "T5", "T6"],
}

# (team1, team2, score1, score2)
RESULTS = [
    ("T1", "T2", 21, 10),
    ("T2", "T3", 5, 20),
    ("T1", "T3", 15, 15),
    ("T4", "T5", 30, 10),
    ("T5", "T6", 12, 18),
    ("T4", "T6", 9, 9),
]


def seed_demo():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        teams = {}
        for group_name, team_names in GROUPS.items():
            group = create_group(db, GroupCreate(name=group_name))
            for name in team_names:
                teams[name] = create_team(db, TeamCreate(name=name, group_id=group.id))
        print(f"✅ Created {len(GROUPS)} groups and {len(teams)} teams")

        # One round per pair of results, courts 1 and 2
        for index in range(0, len(RESULTS), 2):
            db_round = create_round(db, RoundCreate(number=next_round_number(db)))
            for court, (team1, team2, score1, score2) in enumerate(RESULTS[index:index + 2], start=1):
                match = create_match(db, MatchCreate(
                    round_id=db_round.id, court=court,
                    team1_id=teams[team1].id, team2_id=teams[team2].id,
                ))
                match.score1, match.score2 = score1, score2
            db.commit()
            start_round(db, db_round.id)
            finish_round(db, db_round.id)
            print(f"✅ Round {db_round.number} played")

        table = load_standings(db)
        for group_name, rows in table.groups.items():
            print(f"\n📋 Group {group_name}")
            for row in rows:
                print(f"   {row.name}: {row.wins}W {row.losses}L diff {row.diff:+d} ppg {row.ppg:.1f}")
        print(f"\n🏆 Qualifiers: {', '.join(row.name for row in table.qualifiers)}")
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo()
