"""
Psychological dimensions tracked per entity.

The 22 dimensions are declared once, in a fixed order, and every per-dimension
record (impacts, chronic flags, permanence, state arrays) follows that order.
Each dimension carries a profile: its category, clamp range, delta half-life
and the baseline an entity starts from at birth.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Tuple

import numpy as np


class Category(str, Enum):
    """Psychological category used to group dimension accessors."""
    MOOD = "mood"
    NEEDS = "needs"
    SOCIAL_COGNITION = "social_cognition"
    MENTAL_HEALTH = "mental_health"
    DISPOSITION = "disposition"


class Dimension(str, Enum):
    """The 22 affective and cognitive dimensions, in canonical order."""
    VALENCE = "valence"
    AROUSAL = "arousal"
    DOMINANCE = "dominance"
    FATIGUE = "fatigue"
    STRESS = "stress"
    PURPOSE = "purpose"
    LONELINESS = "loneliness"
    PRC = "prc"  # perceived reciprocal caring
    PERCEIVED_LIABILITY = "perceived_liability"
    SELF_HATE = "self_hate"
    PERCEIVED_COMPETENCE = "perceived_competence"
    DEPRESSION = "depression"
    SELF_WORTH = "self_worth"
    HOPELESSNESS = "hopelessness"
    INTERPERSONAL_HOPELESSNESS = "interpersonal_hopelessness"
    ACQUIRED_CAPABILITY = "acquired_capability"
    IMPULSE_CONTROL = "impulse_control"
    EMPATHY = "empathy"
    AGGRESSION = "aggression"
    GRIEVANCE = "grievance"
    REACTANCE = "reactance"
    TRUST_PROPENSITY = "trust_propensity"

    @property
    def index(self) -> int:
        """Position of this dimension in every 22-element array."""
        return _INDEX[self]

    @property
    def profile(self) -> "DimensionProfile":
        return DIMENSION_PROFILES[self]


DIMENSION_COUNT = 22

_INDEX: Dict[Dimension, int] = {dim: i for i, dim in enumerate(Dimension)}


@dataclass(frozen=True)
class DimensionProfile:
    """Static attributes of one dimension."""
    category: Category
    lo: float
    hi: float
    half_life: timedelta
    birth_default: float

    @property
    def bounds(self) -> Tuple[float, float]:
        return (self.lo, self.hi)


HOUR = timedelta(hours=1)
DAY = timedelta(days=1)
WEEK = timedelta(weeks=1)


def _bipolar(category: Category, half_life: timedelta, default: float = 0.0) -> DimensionProfile:
    return DimensionProfile(category, -1.0, 1.0, half_life, default)


def _unipolar(category: Category, half_life: timedelta, default: float) -> DimensionProfile:
    return DimensionProfile(category, 0.0, 1.0, half_life, default)


DIMENSION_PROFILES: Dict[Dimension, DimensionProfile] = {
    # Mood: fast, bipolar
    Dimension.VALENCE: _bipolar(Category.MOOD, 6 * HOUR),
    Dimension.AROUSAL: _bipolar(Category.MOOD, 6 * HOUR),
    Dimension.DOMINANCE: _bipolar(Category.MOOD, 6 * HOUR),
    # Needs
    Dimension.FATIGUE: _unipolar(Category.NEEDS, 8 * HOUR, 0.2),
    Dimension.STRESS: _unipolar(Category.NEEDS, 12 * HOUR, 0.2),
    Dimension.PURPOSE: _unipolar(Category.NEEDS, 3 * DAY, 0.5),
    # Social cognition
    Dimension.LONELINESS: _unipolar(Category.SOCIAL_COGNITION, 1 * DAY, 0.2),
    Dimension.PRC: _unipolar(Category.SOCIAL_COGNITION, 2 * DAY, 0.6),
    Dimension.PERCEIVED_LIABILITY: _unipolar(Category.SOCIAL_COGNITION, 3 * DAY, 0.1),
    Dimension.SELF_HATE: _unipolar(Category.SOCIAL_COGNITION, 3 * DAY, 0.1),
    Dimension.PERCEIVED_COMPETENCE: _unipolar(Category.SOCIAL_COGNITION, 3 * DAY, 0.5),
    # Mental health: slow
    Dimension.DEPRESSION: _unipolar(Category.MENTAL_HEALTH, 2 * WEEK, 0.1),
    Dimension.SELF_WORTH: _unipolar(Category.MENTAL_HEALTH, 2 * WEEK, 0.6),
    Dimension.HOPELESSNESS: _unipolar(Category.MENTAL_HEALTH, 2 * WEEK, 0.1),
    Dimension.INTERPERSONAL_HOPELESSNESS: _unipolar(Category.MENTAL_HEALTH, 2 * WEEK, 0.1),
    Dimension.ACQUIRED_CAPABILITY: _unipolar(Category.MENTAL_HEALTH, 4 * WEEK, 0.0),
    # Disposition: slowest
    Dimension.IMPULSE_CONTROL: _unipolar(Category.DISPOSITION, 1 * WEEK, 0.5),
    Dimension.EMPATHY: _unipolar(Category.DISPOSITION, 4 * WEEK, 0.5),
    Dimension.AGGRESSION: _unipolar(Category.DISPOSITION, 1 * WEEK, 0.2),
    Dimension.GRIEVANCE: _unipolar(Category.DISPOSITION, 1 * WEEK, 0.1),
    Dimension.REACTANCE: _unipolar(Category.DISPOSITION, 1 * WEEK, 0.3),
    Dimension.TRUST_PROPENSITY: _unipolar(Category.DISPOSITION, 4 * WEEK, 0.5),
}


def dimensions_in(category: Category) -> List[Dimension]:
    """Dimensions belonging to a category, in canonical order."""
    return [dim for dim in Dimension if DIMENSION_PROFILES[dim].category == category]


def iter_values(values: np.ndarray) -> Iterator[Tuple[Dimension, float]]:
    """Pair each entry of a 22-element array with its dimension."""
    if values.shape != (DIMENSION_COUNT,):
        raise ValueError(f"Expected shape ({DIMENSION_COUNT},), got {values.shape}")
    for dim in Dimension:
        yield dim, float(values[dim.index])


def to_array(values: Mapping[Dimension, float]) -> np.ndarray:
    """Build a 22-element float array from a (possibly partial) mapping."""
    arr = np.zeros(DIMENSION_COUNT, dtype=np.float64)
    for dim, value in values.items():
        arr[Dimension(dim).index] = value
    return arr


def zeros() -> np.ndarray:
    return np.zeros(DIMENSION_COUNT, dtype=np.float64)
