"""
Simulation: entities, their event logs, and state queries.

Adding an event dispatches it on the event bus. The built-in timeline
recorder appends it to the target's log and cascades a trust update when
the event's source is another simulated entity. Interpretation happens
during replay, so inserting an earlier event later changes nothing but
the sorted log.

`state_at` is a pure function of the logs: it replays from the entity's
birth anchor, reusing the reference snapshot when the query lies at or
after the entity's reference time.

Example:
    sim = Simulation()
    sim.add_entity(Entity(id="person_001", birth_date=datetime(1949, 1, 1)))
    event = EventBuilder(EventType.EXPERIENCE_COMBAT_MILITARY).target("person_001").severity(0.95).build()
    sim.add_event(event, datetime(1968, 6, 1))
    sim.state_at("person_001", datetime(2018, 6, 1)).mood().valence_effective()
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from eventsim.bus import BusEvent, BusTopic, DispatchResult, EventBus
from eventsim.config import EngineConfig
from eventsim.entity import Entity
from eventsim.events import Event
from eventsim.evolution import birth_cursor, compute_state, regress_state, replay_timeline
from eventsim.exceptions import DuplicateEntityError, TemporalRangeError, UnknownEntityError
from eventsim.its import ConvergenceStatus
from eventsim.memory import Memory
from eventsim.state import ComputedState
from eventsim.timeline import EntityTimeline
from eventsim.trust import (
    PerceivedRisk,
    RelationshipGraph,
    TrustUpdate,
    antecedents_from_spec,
    risk_delta_from_antecedents,
)

logger = logging.getLogger(__name__)


class Simulation:
    """Registry of entity timelines with replay-based state queries."""

    def __init__(self, config: Optional[EngineConfig] = None, bus: Optional[EventBus] = None):
        self.config = config or EngineConfig()
        self.bus = bus or EventBus.from_config(self.config.cascade)
        self.relationships = RelationshipGraph(self.config.trust)
        self._timelines: Dict[str, EntityTimeline] = {}

        self.bus.subscribe(self._record_life_event, topics={BusTopic.LIFE_EVENT}, name="timeline_recorder")
        self.bus.subscribe(self._record_trust_update, topics={BusTopic.TRUST_UPDATE}, name="relationship_recorder")

    # --- entities ---

    def add_entity(self, entity: Entity, timestamp: Optional[datetime] = None):
        """
        Register an entity with its reference time (defaults to birth).

        Raises:
            DuplicateEntityError: the id is already registered
            TemporalRangeError: the reference time is outside the lifespan
        """
        if entity.id in self._timelines:
            raise DuplicateEntityError(f"Entity {entity.id} already exists")
        reference = timestamp if timestamp is not None else entity.birth_date
        if not entity.is_alive_at(reference):
            raise TemporalRangeError(
                f"Reference time {reference.isoformat()} is outside the lifespan of {entity.id}"
            )
        self._timelines[entity.id] = EntityTimeline(entity, reference)
        self.relationships.add_entity(entity.id)
        logger.info(f"Added entity {entity.id} ({entity.species.value}), reference {reference.isoformat()}")

    def entity(self, entity_id: str) -> Entity:
        return self.timeline(entity_id).entity

    @property
    def entity_ids(self) -> List[str]:
        return list(self._timelines)

    def timeline(self, entity_id: str) -> EntityTimeline:
        try:
            return self._timelines[entity_id]
        except KeyError:
            raise UnknownEntityError(f"Unknown entity {entity_id}") from None

    # --- events ---

    def add_event(self, event: Event, timestamp: Optional[datetime] = None) -> DispatchResult:
        """
        Dispatch an event at `timestamp` (or the event's own timestamp).

        Raises:
            UnknownEntityError: the target is not registered
            TemporalRangeError: no timestamp, or outside the target's lifespan
            UnknownEventTypeError: the event type has no spec

        Cascade and subscriber errors are reported in the returned result.
        """
        timestamp = timestamp if timestamp is not None else event.timestamp
        if timestamp is None:
            raise TemporalRangeError(f"Event {event.id} has no timestamp")
        stamped = event.at(timestamp)
        self._validate_event(stamped)

        result = self.bus.dispatch(
            BusEvent(BusTopic.LIFE_EVENT, stamped.target, timestamp, payload=stamped)
        )
        if result.errors:
            logger.warning(f"Event {event.id} dispatched with {len(result.errors)} error(s)")
        return result

    def events(self, entity_id: str) -> List[Event]:
        """Logged events in replay order."""
        return [entry.event for entry in self.timeline(entity_id).entries]

    def _validate_event(self, event: Event):
        entity = self.entity(event.target)
        if not entity.is_alive_at(event.timestamp):
            raise TemporalRangeError(
                f"Event {event.id} at {event.timestamp.isoformat()} is outside the lifespan of {entity.id}"
            )
        event.spec()

    def _record_life_event(self, bus_event: BusEvent) -> Optional[List[BusEvent]]:
        event: Event = bus_event.payload
        self._validate_event(event)
        timeline = self.timeline(event.target)
        spec = event.spec()

        timeline.append(event)
        logger.debug(f"Recorded {event.summary()} for {event.target} at {event.timestamp.isoformat()}")

        if not event.source or event.source == event.target or event.source not in self._timelines:
            return None
        antecedents = antecedents_from_spec(spec, event.severity, self.config.trust.antecedent_threshold)
        if not antecedents:
            return None
        update = TrustUpdate(
            trustor=event.target,
            trustee=event.source,
            timestamp=event.timestamp,
            risk_delta=risk_delta_from_antecedents(antecedents, self.config.trust.sensitivity),
            antecedents=tuple(antecedents),
            source_event_id=event.id,
        )
        return [BusEvent(BusTopic.TRUST_UPDATE, event.target, event.timestamp, payload=update)]

    def _record_trust_update(self, bus_event: BusEvent):
        self.relationships.record(bus_event.payload)

    # --- queries ---

    def state_at(self, entity_id: str, timestamp: datetime) -> ComputedState:
        """Effective state of an entity at any timestamp, by replay."""
        timeline = self.timeline(entity_id)
        entity = timeline.entity
        entries = timeline.entries

        if timestamp < entity.birth_date:
            return compute_state(entity, birth_cursor(entity, self.config), timestamp, self.config)

        if timestamp < timeline.reference_time:
            return regress_state(entity, entries, timeline.reference_time, timestamp, self.config)

        cursor = timeline.snapshot_for(timestamp)
        if cursor is None:
            logger.debug(f"Building reference snapshot for {entity_id}")
            cursor = replay_timeline(entity, entries, timeline.reference_time, config=self.config)
            timeline.store_snapshot(timeline.reference_time, cursor)
        cursor = replay_timeline(entity, entries, timestamp, start=cursor, config=self.config)
        return compute_state(entity, cursor, timestamp, self.config)

    def memories_at(self, entity_id: str, timestamp: datetime) -> List[Memory]:
        """Memories formed by `timestamp`, derived by replay like the state."""
        return list(self.state_at(entity_id, timestamp).memories)

    def perceived_risk(self, trustor: str, trustee: str, timestamp: datetime) -> PerceivedRisk:
        self.timeline(trustor)
        self.timeline(trustee)
        return self.relationships.perceived_risk_at(trustor, trustee, timestamp)

    def convergence_at(self, entity_id: str, timestamp: datetime) -> ConvergenceStatus:
        return ConvergenceStatus.from_state(self.state_at(entity_id, timestamp))

    def set_reference_time(self, entity_id: str, timestamp: datetime):
        timeline = self.timeline(entity_id)
        if not timeline.entity.is_alive_at(timestamp):
            raise TemporalRangeError(
                f"Reference time {timestamp.isoformat()} is outside the lifespan of {entity_id}"
            )
        timeline.reference_time = timestamp
        timeline.invalidate_snapshot()

    def invalidate_snapshots(self):
        for timeline in self._timelines.values():
            timeline.invalidate_snapshot()
