"""
Memories derived from processed events, and their mood priming.

Each processed event leaves one immutable Memory. Memories are tagged from
the event's impact shape and carry a salience that decays over a much longer
half-life than the event's raw deltas, so a salient memory keeps nudging
mood after the delta itself has vanished.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

from eventsim.catalog import EventType
from eventsim.config import PrimingConfig, SalienceConfig
from eventsim.dimensions import Dimension
from eventsim.salience import decayed_salience
from eventsim.spec import EventImpact, EventSpec

if TYPE_CHECKING:
    from eventsim.events import Event
    from eventsim.interpreter import InterpretedEvent

logger = logging.getLogger(__name__)


class MemoryTag(str, Enum):
    """Semantic category of a memory."""
    VIOLENCE = "violence"
    CRISIS = "crisis"
    LOSS = "loss"
    BETRAYAL = "betrayal"
    ACHIEVEMENT = "achievement"
    SUPPORT = "support"
    CONFLICT = "conflict"
    PERSONAL = "personal"


class TagRule(NamedTuple):
    tag: MemoryTag
    predicate: Callable[[EventImpact, float], bool]


# Evaluated in order; thresholds scale with severity `s`
TAG_RULES: Tuple[TagRule, ...] = (
    TagRule(MemoryTag.VIOLENCE, lambda i, s: i.acquired_capability > 0.3 * s),
    TagRule(MemoryTag.CRISIS, lambda i, s: i.arousal > 0.5 * s and i.valence < -0.3 * s),
    TagRule(MemoryTag.LOSS, lambda i, s: i.prc < -0.2 * s or i.loneliness > 0.3 * s),
    TagRule(MemoryTag.BETRAYAL, lambda i, s: i.prc < -0.4 * s and i.interpersonal_hopelessness > 0.2 * s),
    TagRule(MemoryTag.ACHIEVEMENT, lambda i, s: i.valence > 0.3 * s and i.purpose > 0.2 * s),
    TagRule(MemoryTag.SUPPORT, lambda i, s: i.prc > 0.3 * s and i.loneliness < -0.2 * s),
    TagRule(MemoryTag.CONFLICT, lambda i, s: i.aggression > 0.3 * s or i.grievance > 0.3 * s),
)


def derive_tags_from_impacts(spec: EventSpec, severity: float) -> List[MemoryTag]:
    """Tags whose rule fires, or [PERSONAL] when none do. Never empty."""
    if severity <= 0.0:
        return [MemoryTag.PERSONAL]
    tags = [rule.tag for rule in TAG_RULES if rule.predicate(spec.impact, severity)]
    return tags or [MemoryTag.PERSONAL]


@dataclass(frozen=True)
class EmotionalSnapshot:
    """Effective mood right after the remembered event was applied."""
    valence: float = 0.0
    arousal: float = 0.0
    dominance: float = 0.0

    @classmethod
    def from_mood(cls, mood) -> "EmotionalSnapshot":
        return cls(
            valence=mood.valence_effective(),
            arousal=mood.arousal_effective(),
            dominance=mood.dominance_effective(),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"valence": self.valence, "arousal": self.arousal, "dominance": self.dominance}


@dataclass(frozen=True)
class Memory:
    """An immutable memory of one processed event."""
    event_ref: str
    tags: Tuple[MemoryTag, ...]
    salience: float
    created_at: datetime
    event_type: Optional[EventType] = None
    severity: float = 0.0
    participants: Tuple[str, ...] = ()
    summary: str = ""
    valence_bias: float = 0.0
    arousal_bias: float = 0.0
    dominance_bias: float = 0.0
    emotional_snapshot: Optional[EmotionalSnapshot] = None

    def has_tag(self, tag: MemoryTag) -> bool:
        return tag in self.tags

    def salience_at(self, timestamp: datetime, config: Optional[SalienceConfig] = None) -> float:
        """Decayed salience; zero before the memory exists."""
        if timestamp < self.created_at:
            return 0.0
        return decayed_salience(self.salience, timestamp - self.created_at, config)

    def to_dict(self) -> dict:
        return {
            "event_ref": self.event_ref,
            "event_type": self.event_type.value if self.event_type else None,
            "tags": [t.value for t in self.tags],
            "salience": self.salience,
            "created_at": self.created_at.isoformat(),
            "participants": list(self.participants),
            "summary": self.summary,
            "emotional_snapshot": self.emotional_snapshot.to_dict() if self.emotional_snapshot else None,
        }


def create_memory_from_event(
    event: "Event",
    interpreted: "InterpretedEvent",
    emotional_snapshot: Optional[EmotionalSnapshot] = None,
) -> Memory:
    """
    Build the memory for an event from its interpretation.

    `emotional_snapshot` is the mood after the event was applied; replay
    always supplies it.
    """
    participants: List[str] = []
    for entity_id in (event.source, event.target):
        if entity_id and entity_id not in participants:
            participants.append(entity_id)

    return Memory(
        event_ref=event.id,
        tags=tuple(interpreted.tags),
        salience=interpreted.salience,
        created_at=interpreted.timestamp,
        event_type=event.event_type,
        severity=event.severity,
        participants=tuple(participants),
        summary=event.summary(),
        valence_bias=interpreted.delta(Dimension.VALENCE),
        arousal_bias=interpreted.delta(Dimension.AROUSAL),
        dominance_bias=interpreted.delta(Dimension.DOMINANCE),
        emotional_snapshot=emotional_snapshot,
    )


def compute_mood_priming(
    memories: Iterable[Memory],
    timestamp: datetime,
    salience_config: Optional[SalienceConfig] = None,
    priming_config: Optional[PrimingConfig] = None,
) -> Dict[Dimension, float]:
    """
    Sum of salience-weighted mood biases over memories formed by `timestamp`.

    Memories whose decayed salience is below the negligible threshold are
    skipped, as are totals that cancel out below it.
    """
    priming_config = priming_config or PrimingConfig()
    weights = {
        Dimension.VALENCE: priming_config.valence_weight,
        Dimension.AROUSAL: priming_config.arousal_weight,
        Dimension.DOMINANCE: priming_config.dominance_weight,
    }
    totals = {dim: 0.0 for dim in weights}

    active = 0
    for memory in memories:
        strength = memory.salience_at(timestamp, salience_config)
        if strength < priming_config.negligible:
            continue
        active += 1
        totals[Dimension.VALENCE] += strength * memory.valence_bias * weights[Dimension.VALENCE]
        totals[Dimension.AROUSAL] += strength * memory.arousal_bias * weights[Dimension.AROUSAL]
        totals[Dimension.DOMINANCE] += strength * memory.dominance_bias * weights[Dimension.DOMINANCE]

    logger.debug(f"Mood priming at {timestamp.isoformat()}: {active} active memories")
    return {dim: value for dim, value in totals.items() if abs(value) >= priming_config.negligible}
