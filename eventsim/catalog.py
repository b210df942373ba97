"""
Built-in event type catalog.

Event specs are registered by decorating a factory function that returns the
spec; the factory runs once at registration. The tables below cover a
representative subset of life events. Acquired capability never carries a
chronic flag and is always fully permanent.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List

from eventsim.dimensions import Dimension
from eventsim.exceptions import UnknownEventTypeError
from eventsim.spec import ChronicFlags, EventImpact, EventSpec, PermanenceValues

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Catalogued life event types."""
    ACHIEVE_GOAL_MAJOR = "achieve_goal_major"
    DEVELOP_ILLNESS_CHRONIC = "develop_illness_chronic"
    END_RELATIONSHIP_ROMANTIC = "end_relationship_romantic"
    EXPERIENCE_AWARENESS_MORTALITY = "experience_awareness_mortality"
    EXPERIENCE_BETRAYAL_TRUST = "experience_betrayal_trust"
    EXPERIENCE_COMBAT_MILITARY = "experience_combat_military"
    EXPERIENCE_ISOLATION_CHRONIC = "experience_isolation_chronic"
    LOSE_PERSON_DEATH = "lose_person_death"
    RECEIVE_SUPPORT_EMOTIONAL = "receive_support_emotional"
    SUFFER_INJURY_ACCIDENTAL = "suffer_injury_accidental"

    @property
    def display_name(self) -> str:
        """'end_relationship_romantic' -> 'End relationship romantic'."""
        return self.value.replace("_", " ").capitalize()


class EventSpecRegistry:
    """Registry mapping event types to their specs."""

    _specs: Dict[EventType, EventSpec] = {}

    @classmethod
    def register(cls, event_type: EventType):
        def decorator(func: Callable[[], EventSpec]):
            cls._specs[EventType(event_type)] = func()
            return func
        return decorator

    @classmethod
    def get(cls, event_type: EventType) -> EventSpec:
        try:
            return cls._specs[EventType(event_type)]
        except (KeyError, ValueError) as e:
            raise UnknownEventTypeError(f"No spec registered for event type {event_type!r}") from e

    @classmethod
    def registered_types(cls) -> List[EventType]:
        return list(cls._specs)

    @classmethod
    def is_registered(cls, event_type: EventType) -> bool:
        return event_type in cls._specs


def get_spec(event_type: EventType) -> EventSpec:
    return EventSpecRegistry.get(event_type)


# --- table helpers ---

_NO_AC = [d for d in Dimension if d is not Dimension.ACQUIRED_CAPABILITY]


def _impact(*values: float) -> EventImpact:
    return EventImpact.from_sequence(values)


def _chronic(*names: str) -> ChronicFlags:
    return ChronicFlags.from_mapping({name: True for name in names})


def _chronic_except(*names: str) -> ChronicFlags:
    excluded = {Dimension(n) for n in names}
    return ChronicFlags.from_mapping({d: True for d in _NO_AC if d not in excluded})


def _permanence(*values: float) -> PermanenceValues:
    """21 fractions for every dimension but acquired capability, which is 1.0."""
    mapping = dict(zip(_NO_AC, values))
    mapping[Dimension.ACQUIRED_CAPABILITY] = 1.0
    return PermanenceValues.from_mapping(mapping)


# Column order: valence, arousal, dominance, fatigue, stress, purpose,
# loneliness, prc, perceived_liability, self_hate, perceived_competence,
# depression, self_worth, hopelessness, interpersonal_hopelessness,
# acquired_capability, impulse_control, empathy, aggression, grievance,
# reactance, trust_propensity

@EventSpecRegistry.register(EventType.EXPERIENCE_COMBAT_MILITARY)
def _combat() -> EventSpec:
    return EventSpec(
        impact=_impact(-0.75, 0.85, -0.65, 0.75, 0.85, -0.15, 0.35, -0.35, 0.35, 0.65, -0.15,
                       0.65, -0.35, 0.65, 0.35, 0.85, -0.65, -0.35, 0.55, 0.35, 0.35, -0.35),
        chronic=_chronic_except("perceived_competence"),
        permanence=_permanence(0.35, 0.35, 0.25, 0.25, 0.35, 0.25, 0.25, 0.25, 0.25, 0.35, 0.12,
                               0.35, 0.25, 0.35, 0.18, 0.25, 0.25, 0.35, 0.20, 0.25, 0.25),
    )


@EventSpecRegistry.register(EventType.EXPERIENCE_AWARENESS_MORTALITY)
def _mortality() -> EventSpec:
    return EventSpec(
        impact=_impact(-0.55, 0.55, -0.55, 0.35, 0.65, 0.20, -0.22, 0.28, 0.15, 0.15, -0.25,
                       0.25, 0.15, 0.15, -0.15, 0.0, -0.35, 0.18, 0.25, -0.15, -0.15, 0.15),
        chronic=_chronic("valence", "dominance", "fatigue", "purpose", "self_worth",
                         "impulse_control", "empathy"),
        permanence=_permanence(0.12, 0.08, 0.12, 0.12, 0.12, 0.12, 0.04, 0.12, 0.06, 0.04, 0.05,
                               0.05, 0.12, 0.05, 0.08, 0.12, 0.25, 0.08, 0.05, 0.08, 0.12),
    )


@EventSpecRegistry.register(EventType.SUFFER_INJURY_ACCIDENTAL)
def _injury() -> EventSpec:
    return EventSpec(
        impact=_impact(-0.32, 0.65, -0.50, 0.35, 0.65, -0.25, 0.15, 0.25, 0.35, 0.12, -0.25,
                       0.25, -0.25, 0.15, 0.12, 0.28, -0.35, -0.15, 0.25, 0.15, 0.15, -0.08),
        chronic=_chronic("valence", "arousal", "dominance", "purpose", "perceived_liability"),
        permanence=_permanence(0.08, 0.12, 0.08, 0.05, 0.05, 0.05, 0.04, 0.05, 0.12, 0.04, 0.06,
                               0.04, 0.06, 0.02, 0.02, 0.04, 0.03, 0.04, 0.05, 0.04, 0.02),
    )


@EventSpecRegistry.register(EventType.EXPERIENCE_BETRAYAL_TRUST)
def _betrayal() -> EventSpec:
    return EventSpec(
        impact=_impact(-0.55, 0.65, -0.55, 0.65, 0.65, -0.35, 0.38, -0.65, 0.25, 0.45, -0.35,
                       0.35, -0.35, 0.35, 0.65, 0.0, -0.35, -0.18, 0.45, 0.68, 0.15, -0.65),
        chronic=_chronic_except("reactance"),
        permanence=_permanence(0.18, 0.12, 0.18, 0.12, 0.12, 0.12, 0.12, 0.25, 0.12, 0.18, 0.12,
                               0.12, 0.18, 0.12, 0.25, 0.12, 0.08, 0.12, 0.25, 0.06, 0.25),
    )


@EventSpecRegistry.register(EventType.LOSE_PERSON_DEATH)
def _bereavement() -> EventSpec:
    return EventSpec(
        impact=_impact(-0.85, 0.65, -0.65, 0.55, 0.85, -0.65, 0.65, -0.25, -0.15, 0.35, -0.35,
                       0.75, -0.25, 0.65, 0.15, 0.15, -0.45, -0.15, 0.15, -0.05, -0.10, -0.35),
        chronic=_chronic_except("perceived_liability", "self_worth", "interpersonal_hopelessness",
                                "impulse_control", "aggression", "grievance", "reactance"),
        permanence=_permanence(0.25, 0.25, 0.25, 0.25, 0.25, 0.25, 0.28, 0.18, 0.12, 0.25, 0.18,
                               0.25, 0.12, 0.25, 0.08, 0.18, 0.15, 0.05, 0.02, 0.04, 0.25),
    )


@EventSpecRegistry.register(EventType.RECEIVE_SUPPORT_EMOTIONAL)
def _support() -> EventSpec:
    return EventSpec(
        impact=_impact(0.42, -0.25, 0.15, -0.25, -0.45, 0.25, -0.35, 0.42, -0.32, -0.40, 0.12,
                       -0.25, 0.40, -0.25, -0.35, 0.0, 0.25, 0.15, -0.28, -0.28, -0.15, 0.15),
        chronic=_chronic("prc", "perceived_liability", "aggression"),
        permanence=_permanence(0.08, 0.05, 0.04, 0.05, 0.05, 0.08, 0.06, 0.20, 0.08, 0.06, 0.05,
                               0.08, 0.12, 0.08, 0.08, 0.04, 0.08, 0.07, 0.06, 0.04, 0.08),
    )


@EventSpecRegistry.register(EventType.ACHIEVE_GOAL_MAJOR)
def _achievement() -> EventSpec:
    return EventSpec(
        impact=_impact(0.65, 0.45, 0.65, 0.25, -0.25, 0.35, 0.15, 0.25, -0.35, -0.35, 0.55,
                       -0.35, 0.35, -0.25, -0.15, 0.0, -0.15, 0.05, -0.25, -0.15, -0.15, 0.18),
        chronic=_chronic("perceived_competence"),
        permanence=_permanence(0.10, 0.04, 0.12, 0.02, 0.04, 0.08, 0.04, 0.05, 0.10, 0.08, 0.25,
                               0.08, 0.12, 0.15, 0.05, 0.03, 0.02, 0.12, 0.04, 0.05, 0.06),
    )


@EventSpecRegistry.register(EventType.EXPERIENCE_ISOLATION_CHRONIC)
def _isolation() -> EventSpec:
    return EventSpec(
        impact=_impact(-0.62, -0.35, -0.55, 0.65, 0.65, -0.45, 0.85, -0.55, 0.25, 0.48, -0.35,
                       0.65, -0.35, 0.65, 0.65, 0.0, -0.45, -0.45, 0.28, 0.55, 0.15, -0.35),
        chronic=_chronic_except(),
        permanence=_permanence(0.18, 0.25, 0.12, 0.18, 0.22, 0.18, 0.18, 0.25, 0.12, 0.20, 0.12,
                               0.25, 0.12, 0.22, 0.18, 0.08, 0.25, 0.12, 0.35, 0.08, 0.18),
    )


@EventSpecRegistry.register(EventType.DEVELOP_ILLNESS_CHRONIC)
def _illness() -> EventSpec:
    return EventSpec(
        impact=_impact(-0.55, 0.50, -0.55, 0.65, 0.55, -0.35, 0.35, 0.25, 0.35, 0.35, -0.35,
                       0.35, -0.35, 0.35, 0.35, 0.35, -0.35, -0.12, 0.35, 0.35, 0.35, -0.15),
        chronic=_chronic_except(),
        permanence=_permanence(0.18, 0.12, 0.18, 0.35, 0.18, 0.12, 0.12, 0.12, 0.25, 0.18, 0.18,
                               0.18, 0.18, 0.12, 0.12, 0.12, 0.06, 0.18, 0.25, 0.25, 0.12),
    )


@EventSpecRegistry.register(EventType.END_RELATIONSHIP_ROMANTIC)
def _breakup() -> EventSpec:
    return EventSpec(
        impact=_impact(-0.55, 0.55, -0.35, 0.35, 0.50, -0.35, 0.35, -0.35, 0.15, 0.32, -0.25,
                       0.35, -0.35, 0.28, 0.35, 0.0, -0.35, -0.15, 0.35, 0.35, 0.25, -0.25),
        chronic=_chronic("stress", "self_worth"),
        permanence=_permanence(0.05, 0.05, 0.05, 0.05, 0.06, 0.06, 0.05, 0.06, 0.06, 0.06, 0.05,
                               0.05, 0.07, 0.06, 0.06, 0.05, 0.04, 0.05, 0.05, 0.05, 0.06),
    )


logger.debug(f"Registered {len(EventSpecRegistry.registered_types())} built-in event specs")
