"""
eventsim: temporal psychological-state engine

Simulates how an individual's psychological state evolves in response to
discrete life events across 22 affective and cognitive dimensions.

This package provides:
- Decaying bounded values with per-dimension half-lives
- Event interpretation into deltas and permanent base shifts
- Replay-based state queries at any timestamp, before or after the reference
- Memories whose salience keeps priming mood after raw deltas have decayed
- A cascade-bounded event bus
- Perceived risk between entities on a directed relationship graph

Example:
    from datetime import datetime
    from eventsim import Entity, EventBuilder, EventType, Simulation

    sim = Simulation()
    sim.add_entity(Entity(id="person_001", birth_date=datetime(1949, 1, 1)))

    event = (
        EventBuilder(EventType.EXPERIENCE_COMBAT_MILITARY)
        .target("person_001")
        .severity(0.95)
        .build()
    )
    sim.add_event(event, datetime(1968, 6, 1))

    state = sim.state_at("person_001", datetime(2018, 6, 1))
    state.mood().valence_effective()
"""

from eventsim.bus import (
    MAX_CASCADE_DEPTH,
    BusEvent,
    BusTopic,
    DispatchResult,
    EventBus,
    Scope,
    Subscription,
)
from eventsim.catalog import EventSpecRegistry, EventType, get_spec
from eventsim.config import EngineConfig, load_config
from eventsim.decay import DecayingValue
from eventsim.dimensions import Category, Dimension
from eventsim.entity import Entity, Species
from eventsim.events import Event, EventBuilder
from eventsim.exceptions import (
    CascadeDepthExceededError,
    DuplicateEntityError,
    EventBuildError,
    EventSimError,
    InvalidSeverityError,
    MalformedSpecError,
    MissingTargetError,
    TemporalRangeError,
    UnknownEntityError,
    UnknownEventTypeError,
)
from eventsim.interpreter import InterpretedEvent, interpret_event
from eventsim.its import ConvergenceStatus, ItsProximalFactor
from eventsim.memory import Memory, MemoryTag, create_memory_from_event, derive_tags_from_impacts
from eventsim.simulation import Simulation
from eventsim.spec import ChronicFlags, EventImpact, EventSpec, PermanenceValues
from eventsim.state import ComputedState, IndividualState
from eventsim.trust import PerceivedRisk, RelationshipGraph

__version__ = "0.1.0"

__all__ = [
    # Dimensions and values
    "Category",
    "Dimension",
    "DecayingValue",
    # Specs and events
    "EventImpact",
    "ChronicFlags",
    "PermanenceValues",
    "EventSpec",
    "EventSpecRegistry",
    "EventType",
    "get_spec",
    "Event",
    "EventBuilder",
    "Entity",
    "Species",
    # Interpretation and memory
    "InterpretedEvent",
    "interpret_event",
    "Memory",
    "MemoryTag",
    "create_memory_from_event",
    "derive_tags_from_impacts",
    # State
    "IndividualState",
    "ComputedState",
    "ConvergenceStatus",
    "ItsProximalFactor",
    # Bus
    "MAX_CASCADE_DEPTH",
    "BusEvent",
    "BusTopic",
    "DispatchResult",
    "EventBus",
    "Scope",
    "Subscription",
    # Trust
    "PerceivedRisk",
    "RelationshipGraph",
    # Simulation and config
    "Simulation",
    "EngineConfig",
    "load_config",
    # Errors
    "EventSimError",
    "EventBuildError",
    "MissingTargetError",
    "InvalidSeverityError",
    "MalformedSpecError",
    "UnknownEventTypeError",
    "TemporalRangeError",
    "UnknownEntityError",
    "DuplicateEntityError",
    "CascadeDepthExceededError",
]
