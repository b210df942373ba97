"""
Memory salience.

Salience starts from a base derived from severity and the event's impact
shape, then is modulated by arousal at encoding and by a negativity bias.
Arousal sharpens encoding up to a ceiling, has no further effect between
the ceiling and the extreme threshold, and impairs encoding above it.
"""

from datetime import timedelta
from typing import Optional

from eventsim.config import SalienceConfig
from eventsim.decay import clamp, decay_factor
from eventsim.entity import Species
from eventsim.spec import EventSpec

_DEFAULT = SalienceConfig()


def compute_base_salience(spec: EventSpec, severity: float) -> float:
    """Severity-driven base with boosts for capability and social impact."""
    if severity <= 0.0:
        return 0.0
    impact = spec.impact

    ac = impact.acquired_capability
    if ac > 0.5:
        ac_boost = 0.2
    elif ac > 0.0:
        ac_boost = 0.1
    else:
        ac_boost = 0.0

    social_boost = 0.1 if abs(impact.loneliness) > 0.3 or abs(impact.prc) > 0.2 else 0.0

    return clamp(0.3 + severity * 0.5 + ac_boost + social_boost, 0.0, 1.0)


def arousal_modulation(
    arousal: float,
    species: Species = Species.HUMAN,
    config: Optional[SalienceConfig] = None,
) -> float:
    """
    Multiplier applied to base salience for arousal at encoding.

    Negative arousal (calm) contributes nothing. The boost grows linearly
    up to the arousal ceiling, then stays flat; above the extreme threshold
    it is scaled down linearly, losing `impairment_strength` at arousal 1.0.
    """
    config = config or _DEFAULT
    level = clamp(arousal, 0.0, 1.0)
    weight = config.species_weight(species)

    factor = 1.0 + weight * config.arousal_gain * min(level, config.arousal_ceiling)

    threshold = config.extreme_arousal_threshold
    if level > threshold:
        excess = (level - threshold) / (1.0 - threshold)
        factor *= 1.0 - config.impairment_strength * excess
    return factor


def negativity_multiplier(valence: float, config: Optional[SalienceConfig] = None) -> float:
    """Amplify negative-valence events; positive and neutral are unchanged."""
    config = config or _DEFAULT
    if valence >= 0.0:
        return 1.0
    return 1.0 + config.negativity_bias * min(-valence, 1.0)


def compute_salience(
    spec: EventSpec,
    severity: float,
    *,
    arousal: float = 0.0,
    valence: float = 0.0,
    species: Species = Species.HUMAN,
    config: Optional[SalienceConfig] = None,
) -> float:
    """Arousal-modulated salience in [0, 1]."""
    base = compute_base_salience(spec, severity)
    if base == 0.0:
        return 0.0
    salience = base * arousal_modulation(arousal, species, config) * negativity_multiplier(valence, config)
    return clamp(salience, 0.0, 1.0)


def decayed_salience(salience: float, age: timedelta, config: Optional[SalienceConfig] = None) -> float:
    """Salience remaining after `age`; unaffected before creation."""
    config = config or _DEFAULT
    return salience * decay_factor(age, config.half_life)
