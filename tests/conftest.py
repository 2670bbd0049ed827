"""
Shared fixtures: an in-memory SQLite store, a session bound to it and a
TestClient whose get_db dependency is pointed at the same store.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base, get_db
from main import app
from api.crud.group_crud import create_group
from api.crud.team_crud import create_team
from api.crud.round_crud import create_round
from api.crud.match_crud import create_match
from schemas.tournament import GroupCreate, TeamCreate, RoundCreate, MatchCreate


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


class TournamentBuilder:
    """Small helper to lay out groups, teams, rounds and matches"""

    def __init__(self, db):
        self.db = db
        self.teams = {}
        self.groups = {}

    def group(self, name):
        self.groups[name] = create_group(self.db, GroupCreate(name=name))
        return self.groups[name]

    def team(self, name, group=None):
        group_id = self.groups[group].id if group else None
        self.teams[name] = create_team(self.db, TeamCreate(name=name, group_id=group_id))
        return self.teams[name]

    def round(self, number):
        return create_round(self.db, RoundCreate(number=number))

    def match(self, db_round, court, team1, team2):
        return create_match(self.db, MatchCreate(
            round_id=db_round.id, court=court,
            team1_id=self.teams[team1].id, team2_id=self.teams[team2].id,
        ))

    def score(self, match, score1, score2):
        match.score1 = score1
        match.score2 = score2
        self.db.commit()
        return match


@pytest.fixture
def builder(db):
    return TournamentBuilder(db)


@pytest.fixture
def two_groups(builder):
    """
    Group A = {T1, T2, T3}, Group B = {T4, T5, T6} with one finished group round:
    T1 21-10 T2, T2 5-20 T3, T1 15-15 T3, T4 30-10 T5, T5 12-18 T6, T4 9-9 T6
    """
    from services.round_lifecycle import start_round, finish_round

    builder.group("A")
    builder.group("B")
    for name in ("T1", "T2", "T3"):
        builder.team(name, "A")
    for name in ("T4", "T5", "T6"):
        builder.team(name, "B")

    results = [
        ("T1", "T2", 21, 10), ("T2", "T3", 5, 20), ("T1", "T3", 15, 15),
        ("T4", "T5", 30, 10), ("T5", "T6", 12, 18), ("T4", "T6", 9, 9),
    ]
    # Two courts per round so every court number stays within the default court count
    for index in range(0, len(results), 2):
        db_round = builder.round(index // 2 + 1)
        for court, (team1, team2, score1, score2) in enumerate(results[index:index + 2], start=1):
            builder.score(builder.match(db_round, court, team1, team2), score1, score2)
        start_round(builder.db, db_round.id)
        finish_round(builder.db, db_round.id)
    return builder
