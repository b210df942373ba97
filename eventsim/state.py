"""
Individual psychological state and its query-time view.

IndividualState holds one DecayingValue per dimension and is what state
evolution mutates. ComputedState is the read-only result of a query: the
state folded up to a timestamp plus the mood priming from surviving
memories, exposed through category accessors such as
`computed.mood().valence_effective()`.
"""

from datetime import datetime
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from eventsim.decay import DECAY_EPSILON, DecayingValue, clamp
from eventsim.dimensions import (
    DIMENSION_PROFILES,
    Category,
    Dimension,
    dimensions_in,
)
from eventsim.entity import Entity
from eventsim.memory import Memory


class IndividualState:
    """Mutable per-dimension state of one entity."""

    def __init__(self, values: Dict[Dimension, DecayingValue]):
        missing = [d.value for d in Dimension if d not in values]
        if missing:
            raise ValueError(f"State is missing dimensions: {missing}")
        self._values = {dim: values[dim] for dim in Dimension}

    @classmethod
    def at_birth(cls, entity: Entity, epsilon: float = DECAY_EPSILON) -> "IndividualState":
        values = {}
        for dim in Dimension:
            profile = DIMENSION_PROFILES[dim]
            values[dim] = DecayingValue(
                base=entity.birth_default(dim),
                lo=profile.lo,
                hi=profile.hi,
                half_life=profile.half_life,
                epsilon=epsilon,
            )
        return cls(values)

    def __getitem__(self, dim: Dimension) -> DecayingValue:
        return self._values[Dimension(dim)]

    def __iter__(self) -> Iterator[Tuple[Dimension, DecayingValue]]:
        return iter(self._values.items())

    def effective(self, dim: Dimension) -> float:
        return self[dim].effective()

    def bases(self) -> np.ndarray:
        return np.array([v.base for v in self._values.values()], dtype=np.float64)

    def deltas(self) -> np.ndarray:
        return np.array([v.delta for v in self._values.values()], dtype=np.float64)

    def copy(self) -> "IndividualState":
        return IndividualState({dim: value.copy() for dim, value in self._values.items()})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndividualState):
            return NotImplemented
        return all(
            self[dim].base == other[dim].base and self[dim].delta == other[dim].delta
            for dim in Dimension
        )

    def __repr__(self) -> str:
        return f"IndividualState(deltas={int(np.count_nonzero(self.deltas()))} nonzero)"


class CategoryView:
    """Accessors for the dimensions of one category."""

    category: Category

    def __init__(self, computed: "ComputedState"):
        self._computed = computed

    def effective(self, dim: Dimension) -> float:
        return self._computed.effective(dim)

    def base(self, dim: Dimension) -> float:
        return self._computed.state[dim].base

    def delta(self, dim: Dimension) -> float:
        return self._computed.state[dim].delta

    def as_dict(self) -> Dict[str, float]:
        return {dim.value: self.effective(dim) for dim in dimensions_in(self.category)}


class Mood(CategoryView):
    category = Category.MOOD

    def valence_effective(self) -> float:
        return self.effective(Dimension.VALENCE)

    def arousal_effective(self) -> float:
        return self.effective(Dimension.AROUSAL)

    def dominance_effective(self) -> float:
        return self.effective(Dimension.DOMINANCE)


class Needs(CategoryView):
    category = Category.NEEDS

    def fatigue_effective(self) -> float:
        return self.effective(Dimension.FATIGUE)

    def stress_effective(self) -> float:
        return self.effective(Dimension.STRESS)

    def purpose_effective(self) -> float:
        return self.effective(Dimension.PURPOSE)


class SocialCognition(CategoryView):
    category = Category.SOCIAL_COGNITION

    def loneliness_effective(self) -> float:
        return self.effective(Dimension.LONELINESS)

    def prc_effective(self) -> float:
        return self.effective(Dimension.PRC)

    def perceived_liability_effective(self) -> float:
        return self.effective(Dimension.PERCEIVED_LIABILITY)

    def self_hate_effective(self) -> float:
        return self.effective(Dimension.SELF_HATE)

    def perceived_competence_effective(self) -> float:
        return self.effective(Dimension.PERCEIVED_COMPETENCE)


class MentalHealth(CategoryView):
    category = Category.MENTAL_HEALTH

    def depression_effective(self) -> float:
        return self.effective(Dimension.DEPRESSION)

    def self_worth_effective(self) -> float:
        return self.effective(Dimension.SELF_WORTH)

    def hopelessness_effective(self) -> float:
        return self.effective(Dimension.HOPELESSNESS)

    def interpersonal_hopelessness_effective(self) -> float:
        return self.effective(Dimension.INTERPERSONAL_HOPELESSNESS)

    def acquired_capability_effective(self) -> float:
        return self.effective(Dimension.ACQUIRED_CAPABILITY)


class Disposition(CategoryView):
    category = Category.DISPOSITION

    def impulse_control_effective(self) -> float:
        return self.effective(Dimension.IMPULSE_CONTROL)

    def empathy_effective(self) -> float:
        return self.effective(Dimension.EMPATHY)

    def aggression_effective(self) -> float:
        return self.effective(Dimension.AGGRESSION)

    def grievance_effective(self) -> float:
        return self.effective(Dimension.GRIEVANCE)

    def reactance_effective(self) -> float:
        return self.effective(Dimension.REACTANCE)

    def trust_propensity_effective(self) -> float:
        return self.effective(Dimension.TRUST_PROPENSITY)


class ComputedState:
    """State of an entity as of `timestamp`, including memory priming."""

    def __init__(
        self,
        entity_id: str,
        timestamp: datetime,
        state: IndividualState,
        memories: Tuple[Memory, ...] = (),
        priming: Optional[Dict[Dimension, float]] = None,
    ):
        self.entity_id = entity_id
        self.timestamp = timestamp
        self.state = state
        self.memories = memories
        self.priming = dict(priming or {})

    def effective(self, dim: Dimension) -> float:
        """clamp(base + delta + priming) for one dimension."""
        dim = Dimension(dim)
        value = self.state[dim]
        return clamp(value.base + value.delta + self.priming.get(dim, 0.0), value.lo, value.hi)

    def effective_array(self) -> np.ndarray:
        return np.array([self.effective(dim) for dim in Dimension], dtype=np.float64)

    def mood(self) -> Mood:
        return Mood(self)

    def needs(self) -> Needs:
        return Needs(self)

    def social_cognition(self) -> SocialCognition:
        return SocialCognition(self)

    def mental_health(self) -> MentalHealth:
        return MentalHealth(self)

    def disposition(self) -> Disposition:
        return Disposition(self)

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            view.category.value: view.as_dict()
            for view in (self.mood(), self.needs(), self.social_cognition(),
                         self.mental_health(), self.disposition())
        }
