"""
Event interpreter: (spec, severity, timestamp) -> InterpretedEvent.

For each dimension the delta is impact * severity. Chronic dimensions route
the whole delta into the base shift as well, and every dimension adds
delta * permanence to the base shift regardless of chronicity. Severity is
used as given, with no response curve.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np

from eventsim.config import SalienceConfig
from eventsim.decay import clamp
from eventsim.dimensions import Dimension, iter_values, zeros
from eventsim.entity import Species
from eventsim.events import validate_severity
from eventsim.memory import MemoryTag, derive_tags_from_impacts
from eventsim.salience import compute_salience
from eventsim.spec import EventSpec

logger = logging.getLogger(__name__)


@dataclass
class InterpretedEvent:
    """Severity-scaled, ready-to-apply effect of one event."""
    deltas: np.ndarray
    base_shifts: np.ndarray
    timestamp: datetime
    source_event_id: Optional[str] = None
    tags: List[MemoryTag] = field(default_factory=lambda: [MemoryTag.PERSONAL])
    salience: float = 0.0
    severity: float = 0.0

    def delta(self, dim: Dimension) -> float:
        return float(self.deltas[Dimension(dim).index])

    def base_shift(self, dim: Dimension) -> float:
        return float(self.base_shifts[Dimension(dim).index])

    @property
    def is_noop(self) -> bool:
        return not self.deltas.any() and not self.base_shifts.any()

    def to_dict(self) -> Dict[str, object]:
        return {
            "source_event_id": self.source_event_id,
            "timestamp": self.timestamp.isoformat(),
            "severity": self.severity,
            "salience": self.salience,
            "tags": [t.value for t in self.tags],
            "deltas": {d.value: v for d, v in iter_values(self.deltas)},
            "base_shifts": {d.value: v for d, v in iter_values(self.base_shifts)},
        }


def compute_effects(spec: EventSpec, severity: float):
    """Return (deltas, base_shifts) arrays for a spec at a severity."""
    if severity == 0.0:
        return zeros(), zeros()
    deltas = spec.impact.as_array() * severity
    chronic_shift = np.where(spec.chronic.as_mask(), deltas, 0.0)
    base_shifts = chronic_shift + deltas * spec.permanence.as_array()
    return deltas, base_shifts


def interpret_event(
    spec: EventSpec,
    severity: float,
    timestamp: datetime,
    *,
    source_event_id: Optional[str] = None,
    species: Species = Species.HUMAN,
    current_arousal: float = 0.0,
    salience_config: Optional[SalienceConfig] = None,
) -> InterpretedEvent:
    """
    Interpret an event for an entity of `species` whose arousal is
    `current_arousal` just before the event.

    Raises:
        InvalidSeverityError: severity is NaN or outside [0, 1]
    """
    severity = validate_severity(severity)
    deltas, base_shifts = compute_effects(spec, severity)

    encoding_arousal = clamp(current_arousal + deltas[Dimension.AROUSAL.index], -1.0, 1.0)
    salience = compute_salience(
        spec,
        severity,
        arousal=encoding_arousal,
        valence=float(deltas[Dimension.VALENCE.index]),
        species=species,
        config=salience_config,
    )
    tags = derive_tags_from_impacts(spec, severity)

    logger.debug(
        f"Interpreted event {source_event_id} at {timestamp.isoformat()}: "
        f"severity={severity:.2f}, salience={salience:.3f}, tags={[t.value for t in tags]}"
    )
    return InterpretedEvent(
        deltas=deltas,
        base_shifts=base_shifts,
        timestamp=timestamp,
        source_event_id=source_event_id,
        tags=tags,
        salience=salience,
        severity=severity,
    )
