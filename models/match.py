from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import Enum as SQLEnum
from db import Base
from models.round import RoundStatus


# Match status mirrors the owning round's status
MatchStatus = RoundStatus


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    round_id = Column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    court = Column(Integer, nullable=False)

    team1_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    team2_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    score1 = Column(Integer, default=0, nullable=False)
    score2 = Column(Integer, default=0, nullable=False)

    status = Column(
        SQLEnum(MatchStatus, values_callable=lambda obj: [e.value for e in obj], name="match_status"),
        default=MatchStatus.PENDING,
        nullable=False,
    )

    # Bumped on every score write so clients can drop stale change echoes
    version = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    round = relationship("Round", back_populates="matches")
    team1 = relationship("Team", foreign_keys=[team1_id])
    team2 = relationship("Team", foreign_keys=[team2_id])

    __table_args__ = (
        UniqueConstraint('round_id', 'court', name='unique_round_court'),
        CheckConstraint('team1_id <> team2_id', name='match_distinct_teams'),
        CheckConstraint('score1 >= 0 AND score2 >= 0', name='match_scores_non_negative'),
        CheckConstraint('court >= 1', name='match_court_positive'),
    )
