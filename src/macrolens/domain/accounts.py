"""Domain models for accounts."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

DEFAULT_CALORIE_GOAL = 2000
DEFAULT_PROTEIN_GOAL = 150
DEFAULT_CARBS_GOAL = 200
DEFAULT_FAT_GOAL = 70


class Goals(BaseModel):
    """Daily nutrition targets."""

    calorie_goal: int = Field(default=DEFAULT_CALORIE_GOAL, ge=0)
    protein_goal: int = Field(default=DEFAULT_PROTEIN_GOAL, ge=0)
    carbs_goal: int = Field(default=DEFAULT_CARBS_GOAL, ge=0)
    fat_goal: int = Field(default=DEFAULT_FAT_GOAL, ge=0)


@dataclass(frozen=True)
class Account:
    """Represents an account stored in the database."""

    id: int
    email: str
    name: str
    password_hash: str
    goals: Goals

    def summary(self) -> dict[str, object]:
        """Return the public identity fields."""
        return {"id": self.id, "email": self.email, "name": self.name}
