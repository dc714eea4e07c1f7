"""Fixture domain model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FixtureDomain(BaseModel):
    """Domain model for FPL fixtures."""

    model_config = ConfigDict(frozen=True)

    fixture_id: int = Field(..., gt=0, description="Unique fixture ID")
    event: Optional[int] = Field(
        None, ge=1, le=38, description="Gameweek number (None while unscheduled)"
    )
    home_team_id: int = Field(..., ge=1, description="Home team ID")
    away_team_id: int = Field(..., ge=1, description="Away team ID")
    home_difficulty: int = Field(..., ge=1, le=5, description="FDR for the home side")
    away_difficulty: int = Field(..., ge=1, le=5, description="FDR for the away side")
    finished: bool = Field(default=False)
    kickoff_utc: Optional[datetime] = Field(None, description="Kickoff time in UTC")

    @model_validator(mode="after")
    def validate_distinct_teams(self):
        if self.home_team_id == self.away_team_id:
            raise ValueError("A fixture needs two different teams")
        return self

    @property
    def involves_team(self) -> set[int]:
        """Get set of team IDs involved in this fixture."""
        return {self.home_team_id, self.away_team_id}

    def is_home_fixture(self, team_id: int) -> bool:
        """Check if the given team is playing at home."""
        return self.home_team_id == team_id

    def get_opponent(self, team_id: int) -> int:
        """Get the opponent team ID for the given team."""
        if team_id == self.home_team_id:
            return self.away_team_id
        elif team_id == self.away_team_id:
            return self.home_team_id
        else:
            raise ValueError(f"Team {team_id} is not involved in this fixture")

    def difficulty_for(self, team_id: int) -> int:
        """Get the difficulty rating from the given team's perspective."""
        if team_id == self.home_team_id:
            return self.home_difficulty
        elif team_id == self.away_team_id:
            return self.away_difficulty
        else:
            raise ValueError(f"Team {team_id} is not involved in this fixture")
