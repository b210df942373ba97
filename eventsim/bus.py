"""
Event bus with bounded cascades.

Subscribers receive the bus events that match their topic, scope and filter
predicate. A handler may return further bus events; these are dispatched in
the same chain one level deeper. A chain never goes deeper than the maximum
cascade depth: the offending event is dropped and a
CascadeDepthExceededError is reported in the DispatchResult, while
everything dispatched before it keeps its effects.

Dispatch is synchronous and breadth-first, so events of one chain are
delivered in a deterministic order.

Example:
    bus = EventBus()

    def on_life_event(event):
        print(f"{event.entity_id}: {event.payload}")

    bus.subscribe(on_life_event, topics={BusTopic.LIFE_EVENT})
    result = bus.dispatch(BusEvent(BusTopic.LIFE_EVENT, "person_001", timestamp, payload))
"""

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Deque, Dict, FrozenSet, Iterable, List, Optional

from eventsim.config import CascadeConfig
from eventsim.exceptions import CascadeDepthExceededError

logger = logging.getLogger(__name__)

MAX_CASCADE_DEPTH = 8


class BusTopic(str, Enum):
    """Kinds of bus events."""
    LIFE_EVENT = "life_event"
    TRUST_UPDATE = "trust_update"


class Scope(str, Enum):
    """Delivery scope of a bus event or subscription."""
    ENTITY = "entity"  # only subscribers bound to the event's entity, plus global ones
    GLOBAL = "global"  # every subscriber


@dataclass(frozen=True)
class BusEvent:
    """Envelope carried by the bus."""
    topic: BusTopic
    entity_id: str
    timestamp: datetime
    payload: Any = None
    scope: Scope = Scope.ENTITY
    depth: int = 0
    chain_id: str = ""
    id: str = field(default_factory=lambda: f"bus_{uuid.uuid4().hex[:12]}")

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "id": self.id,
            "topic": self.topic.value,
            "entity_id": self.entity_id,
            "timestamp": self.timestamp.isoformat(),
            "scope": self.scope.value,
            "depth": self.depth,
            "chain_id": self.chain_id,
        }


BusHandler = Callable[[BusEvent], Optional[Iterable[BusEvent]]]
BusPredicate = Callable[[BusEvent], bool]


@dataclass
class Subscription:
    """
    A handler plus the metadata deciding which events reach it.

    A GLOBAL subscription hears every event on its topics; an ENTITY
    subscription hears only events about `entity_id` (and GLOBAL-scoped
    events). Matching has no side effects.
    """
    handler: BusHandler
    name: str = ""
    topics: Optional[FrozenSet[BusTopic]] = None
    scope: Scope = Scope.GLOBAL
    entity_id: Optional[str] = None
    predicate: Optional[BusPredicate] = None

    def __post_init__(self):
        if self.scope == Scope.ENTITY and not self.entity_id:
            raise ValueError("Entity-scoped subscriptions require an entity_id")
        if not self.name:
            self.name = getattr(self.handler, "__name__", "handler")

    def matches(self, event: BusEvent) -> bool:
        if self.topics is not None and event.topic not in self.topics:
            return False
        if (
            self.scope == Scope.ENTITY
            and event.scope == Scope.ENTITY
            and event.entity_id != self.entity_id
        ):
            return False
        if self.predicate is not None and not self.predicate(event):
            return False
        return True


@dataclass
class DispatchResult:
    """Outcome of dispatching one originating event and its cascades."""
    chain_id: str
    delivered: List[BusEvent] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)
    max_depth: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def truncated(self) -> bool:
        return any(isinstance(e, CascadeDepthExceededError) for e in self.errors)

    @property
    def cascade_count(self) -> int:
        """Number of dispatched events beyond the originating one."""
        return sum(1 for e in self.delivered if e.depth > 0)


class EventBus:
    """Synchronous, cascade-bounded dispatcher."""

    def __init__(self, max_cascade_depth: int = MAX_CASCADE_DEPTH, history_size: int = 1000):
        if max_cascade_depth < 0:
            raise ValueError(f"max_cascade_depth must be >= 0, got {max_cascade_depth}")
        self.max_cascade_depth = max_cascade_depth
        self._subscriptions: List[Subscription] = []
        self._history: List[BusEvent] = []
        self._max_history = history_size

    @classmethod
    def from_config(cls, config: CascadeConfig) -> "EventBus":
        return cls(max_cascade_depth=config.max_depth, history_size=config.history_size)

    def subscribe(
        self,
        handler: BusHandler,
        *,
        topics: Optional[Iterable[BusTopic]] = None,
        scope: Scope = Scope.GLOBAL,
        entity_id: Optional[str] = None,
        predicate: Optional[BusPredicate] = None,
        name: str = "",
    ) -> Subscription:
        subscription = Subscription(
            handler=handler,
            name=name,
            topics=frozenset(topics) if topics is not None else None,
            scope=scope,
            entity_id=entity_id,
            predicate=predicate,
        )
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    @property
    def subscriptions(self) -> List[Subscription]:
        return list(self._subscriptions)

    def dispatch(self, event: BusEvent) -> DispatchResult:
        """
        Deliver `event` and any cascaded events it triggers.

        Handler exceptions and cascade truncation are collected into the
        result and logged; they never stop delivery to other subscribers.
        """
        chain_id = event.chain_id or f"chain_{uuid.uuid4().hex[:12]}"
        result = DispatchResult(chain_id=chain_id)
        queue: Deque[BusEvent] = deque([replace(event, depth=0, chain_id=chain_id)])

        while queue:
            current = queue.popleft()
            self._record(current)
            result.delivered.append(current)
            result.max_depth = max(result.max_depth, current.depth)

            for subscription in list(self._subscriptions):
                if not subscription.matches(current):
                    continue
                try:
                    emitted = subscription.handler(current)
                except Exception as e:
                    logger.warning(f"Bus handler {subscription.name} failed on {current.topic.value}: {e}")
                    result.errors.append(e)
                    continue

                for child in emitted or ():
                    depth = current.depth + 1
                    if depth > self.max_cascade_depth:
                        error = CascadeDepthExceededError(depth, self.max_cascade_depth, chain_id)
                        logger.warning(f"{error}; dropping {child.topic.value} from {subscription.name}")
                        result.errors.append(error)
                        continue
                    queue.append(replace(child, depth=depth, chain_id=chain_id))

        return result

    def _record(self, event: BusEvent):
        self._history.append(event)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

    def get_history(self, topic: Optional[BusTopic] = None) -> List[BusEvent]:
        """Dispatched events in order, optionally filtered by topic."""
        if topic is None:
            return list(self._history)
        return [e for e in self._history if e.topic == topic]

    def clear_history(self):
        self._history.clear()

    def topic_counts(self) -> Dict[BusTopic, int]:
        counts: Dict[BusTopic, int] = {}
        for event in self._history:
            counts[event.topic] = counts.get(event.topic, 0) + 1
        return counts
