"""
Entities whose psychological state is simulated.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from eventsim.dimensions import DIMENSION_PROFILES, Dimension

DAYS_PER_YEAR = 365.25


class Species(str, Enum):
    """Species selects salience weighting; nothing else depends on it."""
    HUMAN = "human"
    ANIMAL = "animal"
    ROBOTIC = "robotic"


class Entity(BaseModel):
    """
    Static attributes of a simulated individual.

    `baselines` overrides the birth default of individual dimensions; values
    must lie inside the dimension's bounds.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    species: Species = Species.HUMAN
    birth_date: datetime
    death_date: Optional[datetime] = None
    baselines: Dict[Dimension, float] = Field(default_factory=dict)

    @field_validator("baselines")
    @classmethod
    def validate_baselines(cls, v: Dict[Dimension, float]) -> Dict[Dimension, float]:
        for dim, value in v.items():
            profile = DIMENSION_PROFILES[dim]
            if not (profile.lo <= value <= profile.hi):
                raise ValueError(
                    f"Baseline for {dim.value} must be within [{profile.lo}, {profile.hi}], got {value}"
                )
        return v

    @model_validator(mode="after")
    def validate_lifespan(self) -> "Entity":
        if self.death_date is not None and self.death_date < self.birth_date:
            raise ValueError("death_date must not precede birth_date")
        return self

    def birth_default(self, dim: Dimension) -> float:
        return self.baselines.get(dim, DIMENSION_PROFILES[dim].birth_default)

    def is_alive_at(self, timestamp: datetime) -> bool:
        if timestamp < self.birth_date:
            return False
        return self.death_date is None or timestamp <= self.death_date

    def age_at(self, timestamp: datetime) -> float:
        """Age in years; negative before birth."""
        return (timestamp - self.birth_date) / timedelta(days=DAYS_PER_YEAR)

    def timestamp_at_age(self, years: float) -> datetime:
        return self.birth_date + timedelta(days=years * DAYS_PER_YEAR)
