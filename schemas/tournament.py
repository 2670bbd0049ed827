from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
from models.round import RoundStatus, RoundType


class ScoreField(str, Enum):
    SCORE1 = "score1"
    SCORE2 = "score2"


# Group schemas
class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, description="Group label")

    @validator('name')
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Group name cannot be blank')
        return v


class Group(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


# Team schemas
class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    group_id: Optional[int] = None


class Team(BaseModel):
    id: int
    name: str
    group_id: Optional[int] = None

    # Computed fields
    group_name: str = ""

    class Config:
        from_attributes = True


# Round schemas
class RoundCreate(BaseModel):
    number: int = Field(..., ge=1, description="Round number, unique across the tournament")


class Round(BaseModel):
    id: int
    number: int
    type: Optional[RoundType] = None
    status: RoundStatus
    is_paused: bool = False
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    total_paused_time: int = 0
    paused_time_at_start: int = 0
    last_pause_start: Optional[datetime] = None

    class Config:
        from_attributes = True


# Match schemas
class MatchCreate(BaseModel):
    round_id: int
    court: int = Field(1, ge=1)
    team1_id: int
    team2_id: int

    @validator('team2_id')
    def teams_differ(cls, v, values):
        if 'team1_id' in values and v == values['team1_id']:
            raise ValueError('A team cannot play itself')
        return v


class Match(BaseModel):
    id: int
    round_id: int
    court: int
    team1_id: int
    team2_id: int
    score1: int = 0
    score2: int = 0
    status: RoundStatus
    version: int = 0

    class Config:
        from_attributes = True


class MatchListItem(Match):
    # Missing relations render blank rather than failing
    round_number: Optional[int] = None
    team1_name: str = ""
    team2_name: str = ""


class ScoreDelta(BaseModel):
    field: ScoreField
    delta: int

    @validator('delta')
    def unit_delta(cls, v):
        if v not in (1, -1):
            raise ValueError('delta must be +1 or -1')
        return v


# Court view
class CourtMatch(MatchListItem):
    start_time: Optional[datetime] = None
    is_paused: bool = False
    elapsed_seconds: int = 0
    clock: str = "0:00"


# Standings
class StandingRow(BaseModel):
    team_id: int
    name: str
    group: str
    played: int
    wins: int
    losses: int
    points_for: int
    points_against: int
    diff: int
    ppg: float


class GroupStandings(BaseModel):
    name: str
    standings: List[StandingRow] = []


class Qualifier(BaseModel):
    seed: int
    team_id: int
    name: str
    group: str


class StandingsResponse(BaseModel):
    groups: List[GroupStandings] = []
    qualifiers: List[Qualifier] = []
    ready_for_semifinals: bool = False


class ReconcileResult(BaseModel):
    repaired_matches: int
