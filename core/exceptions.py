from fastapi import HTTPException, status


class TournamentException(HTTPException):
    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


# Lookups

class GroupNotFound(TournamentException):
    def __init__(self):
        super().__init__("Group not found", status.HTTP_404_NOT_FOUND)


class TeamNotFound(TournamentException):
    def __init__(self, team_id=None):
        detail = "Team not found" if team_id is None else f"Team {team_id} not found"
        super().__init__(detail, status.HTTP_404_NOT_FOUND)


class RoundNotFound(TournamentException):
    def __init__(self):
        super().__init__("Round not found", status.HTTP_404_NOT_FOUND)


class MatchNotFound(TournamentException):
    def __init__(self):
        super().__init__("Match not found", status.HTTP_404_NOT_FOUND)


# Conflicts

class GroupNameTaken(TournamentException):
    def __init__(self, name: str):
        super().__init__(f"Group '{name}' already exists", status.HTTP_409_CONFLICT)


class RoundNumberTaken(TournamentException):
    def __init__(self, number: int):
        super().__init__(f"Round {number} already exists", status.HTTP_409_CONFLICT)


class CourtTaken(TournamentException):
    def __init__(self, court: int):
        super().__init__(f"Court {court} already has a match in this round", status.HTTP_409_CONFLICT)


class InvalidRoundTransition(TournamentException):
    def __init__(self, action: str, current: str):
        super().__init__(f"Cannot {action} a round that is {current}", status.HTTP_409_CONFLICT)


# Preconditions

class InvalidMatchTeams(TournamentException):
    def __init__(self, reason: str = "A team cannot play itself"):
        super().__init__(reason)


class InvalidCourt(TournamentException):
    def __init__(self, court: int, court_count: int):
        super().__init__(f"Court must be between 1 and {court_count}, got {court}")


class MatchNotActive(TournamentException):
    def __init__(self):
        super().__init__("Scores can only change while the match is active")


class RoundNotDeletable(TournamentException):
    def __init__(self):
        super().__init__("Only semifinal and final rounds can be deleted")


class InsufficientQualifiers(TournamentException):
    def __init__(self, count: int):
        super().__init__(f"Semifinals need 4 qualifiers, have {count}")


class SemifinalsNotFinished(TournamentException):
    def __init__(self):
        super().__init__("Final needs exactly one finished semifinal round")


class InvalidSemifinalResult(TournamentException):
    def __init__(self, detail: str = "Semifinal round must have exactly 2 finished matches"):
        super().__init__(detail)


class SemifinalUndecided(InvalidSemifinalResult):
    def __init__(self, court: int):
        super().__init__(f"Semifinal on court {court} is tied; no winner can advance")


# Courtside client

class ScoreUpdateFailed(Exception):
    """Raised by a remote score writer when the store rejects or drops the write."""
