"""
Relationship trust: perceived risk between ordered pairs of entities.

PerceivedRisk is a decaying value in [0, 1] with a base of 0.3 and a
seven-day half-life. Trust-relevant events move its delta through trust
antecedents (ability, benevolence, integrity) derived from the event's
impact. Each (trustor, trustee) pair keeps an append-only log of trust
updates on a directed relationship graph, and risk at any time is
replayed from that log.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from itertools import count
from typing import Iterator, List, Optional, Tuple

import networkx as nx

from eventsim.config import TrustConfig
from eventsim.decay import DECAY_EPSILON, DecayingValue, clamp
from eventsim.dimensions import Dimension
from eventsim.spec import EventSpec

logger = logging.getLogger(__name__)

DEFAULT_RISK_BASE = 0.3
RISK_HALF_LIFE = timedelta(days=7)


class PerceivedRisk:
    """Perceived risk of trusting one specific other entity."""

    def __init__(
        self,
        base: float = DEFAULT_RISK_BASE,
        half_life: timedelta = RISK_HALF_LIFE,
        epsilon: float = DECAY_EPSILON,
    ):
        self._value = DecayingValue(base=base, lo=0.0, hi=1.0, half_life=half_life, epsilon=epsilon)

    @classmethod
    def new(cls) -> "PerceivedRisk":
        return cls()

    @classmethod
    def with_base(cls, base: float) -> "PerceivedRisk":
        return cls(base=base)

    @classmethod
    def from_config(cls, config: TrustConfig) -> "PerceivedRisk":
        return cls(base=config.base_risk, half_life=config.half_life)

    def effective(self) -> float:
        return self._value.effective()

    def base(self) -> float:
        return self._value.base

    def delta(self) -> float:
        return self._value.delta

    def add_delta(self, amount: float):
        self._value.add_delta(amount)

    def set_delta(self, value: float):
        self._value.set_delta(value)

    def set_base(self, value: float):
        self._value.set_base(value)

    def apply_decay(self, elapsed: timedelta):
        self._value.apply_decay(elapsed)

    def reset_delta(self):
        self._value.reset_delta()

    def __repr__(self) -> str:
        return f"PerceivedRisk(base={self.base():.3f}, delta={self.delta():.3f})"


class TrustAntecedentType(str, Enum):
    ABILITY = "ability"
    BENEVOLENCE = "benevolence"
    INTEGRITY = "integrity"


class AntecedentDirection(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class TrustAntecedent:
    antecedent_type: TrustAntecedentType
    direction: AntecedentDirection
    magnitude: float

    @property
    def signed_magnitude(self) -> float:
        return self.magnitude if self.direction == AntecedentDirection.POSITIVE else -self.magnitude


ANTECEDENT_MAPPING: Tuple[Tuple[Dimension, TrustAntecedentType], ...] = (
    (Dimension.TRUST_PROPENSITY, TrustAntecedentType.INTEGRITY),
    (Dimension.PRC, TrustAntecedentType.BENEVOLENCE),
    (Dimension.PERCEIVED_COMPETENCE, TrustAntecedentType.ABILITY),
)


def antecedents_from_spec(
    spec: EventSpec,
    severity: float,
    threshold: float = 0.05,
) -> List[TrustAntecedent]:
    """Trust antecedents signalled by an event, skipping weak impacts."""
    antecedents = []
    for dim, antecedent_type in ANTECEDENT_MAPPING:
        impact = spec.impact.get(dim)
        if abs(impact) <= threshold:
            continue
        direction = AntecedentDirection.POSITIVE if impact > 0 else AntecedentDirection.NEGATIVE
        antecedents.append(TrustAntecedent(antecedent_type, direction, clamp(abs(impact) * severity, 0.0, 1.0)))
    return antecedents


def risk_delta_from_antecedents(antecedents: List[TrustAntecedent], sensitivity: float = 0.5) -> float:
    """Negative antecedents raise risk, positive ones lower it."""
    total = sum(a.signed_magnitude for a in antecedents)
    return clamp(-sensitivity * total, -1.0, 1.0)


@dataclass(frozen=True)
class TrustUpdate:
    """One entry of a relationship's trust log."""
    trustor: str
    trustee: str
    timestamp: datetime
    risk_delta: float
    antecedents: Tuple[TrustAntecedent, ...] = ()
    source_event_id: Optional[str] = None


class RelationshipGraph:
    """Directed graph of relationships; each edge holds its trust log."""

    def __init__(self, config: Optional[TrustConfig] = None):
        self.config = config or TrustConfig()
        self.graph = nx.DiGraph()
        self._seq = count()

    def add_entity(self, entity_id: str):
        self.graph.add_node(entity_id)

    def has_relationship(self, trustor: str, trustee: str) -> bool:
        return self.graph.has_edge(trustor, trustee)

    def record(self, update: TrustUpdate):
        """Append a trust update, creating the relationship on first interaction."""
        if not self.graph.has_edge(update.trustor, update.trustee):
            self.graph.add_edge(update.trustor, update.trustee, updates=[])
            logger.info(f"New relationship {update.trustor} -> {update.trustee}")
        updates = self.graph.edges[update.trustor, update.trustee]["updates"]
        updates.append((update.timestamp, next(self._seq), update))
        updates.sort(key=lambda item: (item[0], item[1]))

    def updates(self, trustor: str, trustee: str) -> List[TrustUpdate]:
        if not self.graph.has_edge(trustor, trustee):
            return []
        return [u for _, _, u in self.graph.edges[trustor, trustee]["updates"]]

    def trustees(self, trustor: str) -> Iterator[str]:
        if trustor not in self.graph:
            return iter(())
        return iter(self.graph.successors(trustor))

    def perceived_risk_at(self, trustor: str, trustee: str, timestamp: datetime) -> PerceivedRisk:
        """Replay the pair's trust log up to `timestamp`."""
        risk = PerceivedRisk.from_config(self.config)
        cursor: Optional[datetime] = None
        for update in self.updates(trustor, trustee):
            if update.timestamp > timestamp:
                break
            if cursor is not None:
                risk.apply_decay(update.timestamp - cursor)
            risk.add_delta(update.risk_delta)
            cursor = update.timestamp
        if cursor is not None:
            risk.apply_decay(timestamp - cursor)
        return risk
