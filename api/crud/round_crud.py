from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Tuple
from models.round import Round, RoundStatus, RoundType
from models.match import Match
from schemas.tournament import RoundCreate
from core.events import changefeed, serialize_row
from core.exceptions import RoundNumberTaken


def create_round(db: Session, round_data: RoundCreate):
    """Create a group-stage round"""
    if db.query(Round).filter(Round.number == round_data.number).first():
        raise RoundNumberTaken(round_data.number)

    db_round = Round(number=round_data.number, type=RoundType.GROUP, status=RoundStatus.PENDING)
    db.add(db_round)
    db.commit()
    db.refresh(db_round)
    changefeed.publish("rounds", "INSERT", new_row=serialize_row(db_round))
    return db_round


def get_round(db: Session, round_id: int):
    return db.query(Round).filter(Round.id == round_id).first()


def get_rounds(db: Session):
    return db.query(Round).order_by(Round.number).all()


def get_rounds_by_type(db: Session, round_type: RoundType, status: Optional[RoundStatus] = None):
    query = db.query(Round).filter(Round.type == round_type)
    if status is not None:
        query = query.filter(Round.status == status)
    return query.order_by(Round.number).all()


def get_active_rounds(db: Session):
    return db.query(Round).filter(Round.status == RoundStatus.ACTIVE).order_by(Round.number).all()


def get_round_matches(db: Session, round_id: int) -> List[Match]:
    return db.query(Match).filter(Match.round_id == round_id).order_by(Match.court).all()


def next_round_number(db: Session) -> int:
    """Max existing round number + 1 (1 when there are no rounds)"""
    current = db.query(func.max(Round.number)).scalar()
    return (current or 0) + 1


def create_round_with_matches(db: Session, round_type: RoundType, pairings: List[Tuple[int, int, int]]):
    """
    Create a round of the given type with one match per (court, team1_id, team2_id),
    in a single commit.
    """
    db_round = Round(number=next_round_number(db), type=round_type, status=RoundStatus.PENDING)
    db.add(db_round)
    db.flush()

    matches = [
        Match(round_id=db_round.id, court=court, team1_id=team1_id, team2_id=team2_id,
              status=RoundStatus.PENDING)
        for court, team1_id, team2_id in pairings
    ]
    db.add_all(matches)
    db.commit()
    db.refresh(db_round)

    changefeed.publish("rounds", "INSERT", new_row=serialize_row(db_round))
    for match in matches:
        db.refresh(match)
        changefeed.publish("matches", "INSERT", new_row=serialize_row(match))
    return db_round


def update_round_and_matches(db: Session, db_round: Round, round_values: dict, match_values: dict,
                             bump_version: bool = False):
    """
    Apply round_values to the round and match_values to every match of the round,
    committed together so round and match status never diverge.
    bump_version marks a score change on every match.
    """
    old_round = serialize_row(db_round)
    matches = get_round_matches(db, db_round.id)
    old_matches = [serialize_row(m) for m in matches]

    for key, value in round_values.items():
        setattr(db_round, key, value)
    for match in matches:
        for key, value in match_values.items():
            setattr(match, key, value)
        if bump_version:
            match.version = (match.version or 0) + 1

    db.commit()
    db.refresh(db_round)

    changefeed.publish("rounds", "UPDATE", old_row=old_round, new_row=serialize_row(db_round))
    for old, match in zip(old_matches, matches):
        db.refresh(match)
        changefeed.publish("matches", "UPDATE", old_row=old, new_row=serialize_row(match))
    return db_round


def update_round(db: Session, db_round: Round, values: dict):
    """Round-only update (pause bookkeeping)"""
    old_round = serialize_row(db_round)
    for key, value in values.items():
        setattr(db_round, key, value)
    db.commit()
    db.refresh(db_round)
    changefeed.publish("rounds", "UPDATE", old_row=old_round, new_row=serialize_row(db_round))
    return db_round


def delete_round_with_matches(db: Session, db_round: Round):
    """Delete the round's matches, then the round, in one transaction"""
    old_round = serialize_row(db_round)
    matches = get_round_matches(db, db_round.id)
    old_matches = [serialize_row(m) for m in matches]

    for match in matches:
        db.delete(match)
    db.flush()
    db.delete(db_round)
    db.commit()

    for old in old_matches:
        changefeed.publish("matches", "DELETE", old_row=old)
    changefeed.publish("rounds", "DELETE", old_row=old_round)
