"""
Event impact specifications.

An EventSpec is the immutable (impact, chronic, permanence) triple that the
interpreter consumes. Each part is a record with one named field per
dimension, so a misspelled or missing dimension fails at construction.
"""

from typing import Annotated, Any, Dict, Mapping, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from eventsim.dimensions import DIMENSION_COUNT, Dimension
from eventsim.exceptions import MalformedSpecError

Impact = Annotated[float, Field(ge=-1.0, le=1.0, allow_inf_nan=False)]
Fraction = Annotated[float, Field(ge=0.0, le=1.0, allow_inf_nan=False)]


class DimensionRecord(BaseModel):
    """Base for records holding one value per dimension."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def get(self, dim: Dimension) -> Any:
        return getattr(self, Dimension(dim).value)

    def as_array(self) -> np.ndarray:
        """Values in canonical dimension order."""
        return np.array([self.get(dim) for dim in Dimension], dtype=np.float64)

    def items(self):
        for dim in Dimension:
            yield dim, self.get(dim)

    @classmethod
    def from_mapping(cls, values: Mapping[Any, Any]):
        """Build from a mapping keyed by Dimension or dimension name."""
        return cls(**{Dimension(k).value: v for k, v in values.items()})

    @classmethod
    def from_sequence(cls, values):
        """Build from 22 values in canonical dimension order."""
        values = list(values)
        if len(values) != DIMENSION_COUNT:
            raise ValueError(f"Expected {DIMENSION_COUNT} values, got {len(values)}")
        return cls(**{dim.value: v for dim, v in zip(Dimension, values)})


class EventImpact(DimensionRecord):
    """Per-dimension impact magnitude in [-1, 1]."""
    valence: Impact = 0.0
    arousal: Impact = 0.0
    dominance: Impact = 0.0
    fatigue: Impact = 0.0
    stress: Impact = 0.0
    purpose: Impact = 0.0
    loneliness: Impact = 0.0
    prc: Impact = 0.0
    perceived_liability: Impact = 0.0
    self_hate: Impact = 0.0
    perceived_competence: Impact = 0.0
    depression: Impact = 0.0
    self_worth: Impact = 0.0
    hopelessness: Impact = 0.0
    interpersonal_hopelessness: Impact = 0.0
    acquired_capability: Impact = 0.0
    impulse_control: Impact = 0.0
    empathy: Impact = 0.0
    aggression: Impact = 0.0
    grievance: Impact = 0.0
    reactance: Impact = 0.0
    trust_propensity: Impact = 0.0


class ChronicFlags(DimensionRecord):
    """Per-dimension flag routing the full delta into the base."""
    valence: bool = False
    arousal: bool = False
    dominance: bool = False
    fatigue: bool = False
    stress: bool = False
    purpose: bool = False
    loneliness: bool = False
    prc: bool = False
    perceived_liability: bool = False
    self_hate: bool = False
    perceived_competence: bool = False
    depression: bool = False
    self_worth: bool = False
    hopelessness: bool = False
    interpersonal_hopelessness: bool = False
    acquired_capability: bool = False
    impulse_control: bool = False
    empathy: bool = False
    aggression: bool = False
    grievance: bool = False
    reactance: bool = False
    trust_propensity: bool = False

    def as_mask(self) -> np.ndarray:
        return np.array([self.get(dim) for dim in Dimension], dtype=bool)


class PermanenceValues(DimensionRecord):
    """Per-dimension share of the delta that becomes a lasting base shift."""
    valence: Fraction = 0.0
    arousal: Fraction = 0.0
    dominance: Fraction = 0.0
    fatigue: Fraction = 0.0
    stress: Fraction = 0.0
    purpose: Fraction = 0.0
    loneliness: Fraction = 0.0
    prc: Fraction = 0.0
    perceived_liability: Fraction = 0.0
    self_hate: Fraction = 0.0
    perceived_competence: Fraction = 0.0
    depression: Fraction = 0.0
    self_worth: Fraction = 0.0
    hopelessness: Fraction = 0.0
    interpersonal_hopelessness: Fraction = 0.0
    acquired_capability: Fraction = 0.0
    impulse_control: Fraction = 0.0
    empathy: Fraction = 0.0
    aggression: Fraction = 0.0
    grievance: Fraction = 0.0
    reactance: Fraction = 0.0
    trust_propensity: Fraction = 0.0


class EventSpec(BaseModel):
    """
    Immutable impact profile of an event type.

    Looked up from the catalog by event type, or supplied directly for
    custom events via `EventSpec.custom(...)`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    impact: EventImpact = Field(default_factory=EventImpact)
    chronic: ChronicFlags = Field(default_factory=ChronicFlags)
    permanence: PermanenceValues = Field(default_factory=PermanenceValues)

    @classmethod
    def custom(
        cls,
        impact: Mapping[Any, float],
        chronic: Optional[Mapping[Any, bool]] = None,
        permanence: Optional[Mapping[Any, float]] = None,
    ) -> "EventSpec":
        """
        Build a spec from partial mappings; missing dimensions default to zero.

        Raises:
            MalformedSpecError: unknown dimension or out-of-range value
        """
        try:
            return cls(
                impact=EventImpact.from_mapping(impact),
                chronic=ChronicFlags.from_mapping(chronic or {}),
                permanence=PermanenceValues.from_mapping(permanence or {}),
            )
        except (ValidationError, ValueError) as e:
            raise MalformedSpecError(f"Invalid custom event spec: {e}") from e

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return self.model_dump()

