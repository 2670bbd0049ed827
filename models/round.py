from sqlalchemy import Column, Integer, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import Enum as SQLEnum
from db import Base
import enum


class RoundStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    FINISHED = "finished"


class RoundType(str, enum.Enum):
    GROUP = "group"
    SEMI = "semi"
    FINAL = "final"


def _values(enum_cls):
    return [e.value for e in enum_cls]


class Round(Base):
    __tablename__ = "rounds"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, unique=True, nullable=False)
    # NULL is read as a group-stage round
    type = Column(SQLEnum(RoundType, values_callable=_values, name="round_type"), nullable=True)

    # Status and timing
    status = Column(
        SQLEnum(RoundStatus, values_callable=_values, name="round_status"),
        default=RoundStatus.PENDING,
        nullable=False,
    )
    is_paused = Column(Boolean, default=False, nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    total_paused_time = Column(Integer, default=0, nullable=False)  # seconds
    # total_paused_time when the current run started; earlier runs' pauses are not subtracted
    paused_time_at_start = Column(Integer, default=0, nullable=False)
    last_pause_start = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    matches = relationship("Match", back_populates="round", order_by="Match.court")

    @property
    def round_type(self) -> RoundType:
        return self.type or RoundType.GROUP
