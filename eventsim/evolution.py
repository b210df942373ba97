"""
State evolution over time.

Forward in time, state is advanced by decaying every delta and folding in
events as they are reached; each event is interpreted at that point
against the replayed state. Backward in time nothing is inverted: decay
is lossy, so an earlier state is obtained by replaying the event log from
the entity's birth anchor up to the earlier timestamp.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Sequence

from eventsim.config import EngineConfig
from eventsim.dimensions import Dimension
from eventsim.entity import Entity
from eventsim.interpreter import InterpretedEvent, interpret_event
from eventsim.memory import EmotionalSnapshot, Memory, compute_mood_priming, create_memory_from_event
from eventsim.state import ComputedState, IndividualState

if TYPE_CHECKING:
    from eventsim.events import Event
    from eventsim.timeline import LogEntry

logger = logging.getLogger(__name__)


def advance_state(state: IndividualState, from_t: datetime, to_t: datetime) -> IndividualState:
    """
    Decay every delta by `to_t - from_t` using each dimension's half-life.

    Bases are untouched. Mutates and returns `state`.
    """
    if to_t < from_t:
        raise ValueError(
            f"Cannot advance state backwards from {from_t.isoformat()} to {to_t.isoformat()}; "
            "use regress_state"
        )
    elapsed = to_t - from_t
    for _, value in state:
        value.apply_decay(elapsed)
    return state


def apply_interpreted_event_to_state(state: IndividualState, event: InterpretedEvent) -> IndividualState:
    """Add the event's deltas and base shifts. Mutates and returns `state`."""
    for dim in Dimension:
        value = state[dim]
        value.add_delta(float(event.deltas[dim.index]))
        value.shift_base(float(event.base_shifts[dim.index]))
    return state


def reverse_interpreted_event_from_state(state: IndividualState, event: InterpretedEvent) -> IndividualState:
    """
    Subtract the event's deltas and base shifts.

    Exact only when no decay has happened since the event was applied and
    no clamp was hit; regression never relies on it.
    """
    for dim in Dimension:
        value = state[dim]
        value.add_delta(-float(event.deltas[dim.index]))
        value.shift_base(-float(event.base_shifts[dim.index]))
    return state


@dataclass
class ReplayCursor:
    """
    State folded over a sorted log prefix.

    `cursor_time` is the timestamp of the last folded entry (or the birth
    anchor) and `folded` the number of entries consumed. The state has not
    been decayed past `cursor_time`.
    """
    state: IndividualState
    cursor_time: datetime
    folded: int = 0
    memories: List[Memory] = field(default_factory=list)

    def copy(self) -> "ReplayCursor":
        return ReplayCursor(
            state=self.state.copy(),
            cursor_time=self.cursor_time,
            folded=self.folded,
            memories=list(self.memories),
        )


def birth_cursor(entity: Entity, config: Optional[EngineConfig] = None) -> ReplayCursor:
    config = config or EngineConfig()
    return ReplayCursor(
        state=IndividualState.at_birth(entity, epsilon=config.decay.epsilon),
        cursor_time=entity.birth_date,
    )


def fold_event(entity: Entity, cursor: ReplayCursor, event: "Event", config: EngineConfig) -> Memory:
    """
    Interpret `event` against the cursor's state and apply it.

    The cursor must already be advanced to the event's timestamp. Encoding
    arousal is the effective arousal just before the event, memory priming
    included. Mutates the cursor and returns the new memory.
    """
    timestamp = event.timestamp
    priming = compute_mood_priming(cursor.memories, timestamp, config.salience, config.priming)
    before = ComputedState(entity.id, timestamp, cursor.state, priming=priming)

    interpreted = interpret_event(
        event.spec(),
        event.severity,
        timestamp,
        source_event_id=event.id,
        species=entity.species,
        current_arousal=before.effective(Dimension.AROUSAL),
        salience_config=config.salience,
    )
    apply_interpreted_event_to_state(cursor.state, interpreted)

    after = ComputedState(entity.id, timestamp, cursor.state, priming=priming)
    memory = create_memory_from_event(event, interpreted, EmotionalSnapshot.from_mood(after.mood()))
    cursor.memories.append(memory)
    return memory


def replay_timeline(
    entity: Entity,
    entries: Sequence["LogEntry"],
    until: datetime,
    *,
    start: Optional[ReplayCursor] = None,
    config: Optional[EngineConfig] = None,
) -> ReplayCursor:
    """
    Fold every entry with timestamp <= `until` into a cursor.

    `entries` must be sorted by (timestamp, insertion order). Each event is
    interpreted against the replayed state at its own timestamp, so the
    result depends only on the sorted log. When `start` is given it must
    have been folded over a prefix of the same entries; it is copied, never
    mutated.
    """
    config = config or EngineConfig()
    cursor = start.copy() if start is not None else birth_cursor(entity, config)

    for entry in entries[cursor.folded:]:
        if entry.timestamp > until:
            break
        advance_state(cursor.state, cursor.cursor_time, entry.timestamp)
        fold_event(entity, cursor, entry.event, config)
        cursor.cursor_time = entry.timestamp
        cursor.folded += 1

    logger.debug(f"Replayed {cursor.folded} events for {entity.id} up to {until.isoformat()}")
    return cursor


def compute_state(
    entity: Entity,
    cursor: ReplayCursor,
    at: datetime,
    config: Optional[EngineConfig] = None,
) -> ComputedState:
    """Decay a cursor's state to `at` and fold in memory priming."""
    config = config or EngineConfig()
    if at < entity.birth_date:
        return ComputedState(entity.id, at, IndividualState.at_birth(entity, config.decay.epsilon))

    state = advance_state(cursor.state.copy(), cursor.cursor_time, at)
    priming = compute_mood_priming(cursor.memories, at, config.salience, config.priming)
    return ComputedState(entity.id, at, state, tuple(cursor.memories), priming)


def regress_state(
    entity: Entity,
    entries: Sequence["LogEntry"],
    reference_t: datetime,
    target_t: datetime,
    config: Optional[EngineConfig] = None,
) -> ComputedState:
    """State at `target_t < reference_t`, by replay from the birth anchor."""
    if target_t > reference_t:
        raise ValueError(
            f"regress_state target {target_t.isoformat()} is after reference {reference_t.isoformat()}"
        )
    cursor = replay_timeline(entity, entries, target_t, config=config)
    return compute_state(entity, cursor, target_t, config)
