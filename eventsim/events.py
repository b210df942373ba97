"""
Life event records and their builder.

Events are validated when built: a missing target or a severity that is NaN
or outside [0, 1] fails immediately with a typed error and never reaches
state evolution.

Example:
    event = (
        EventBuilder(EventType.EXPERIENCE_BETRAYAL_TRUST)
        .source("friend_001")
        .target("person_001")
        .severity(0.8)
        .build()
    )
"""

import math
import numbers
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from eventsim.catalog import EventType, get_spec
from eventsim.exceptions import InvalidSeverityError, MissingTargetError
from eventsim.spec import EventSpec

DEFAULT_SEVERITY = 0.5
DEFAULT_CUSTOM_SEVERITY = 1.0


def new_event_id() -> str:
    return f"evt_{uuid.uuid4()}"


def validate_severity(severity) -> float:
    """Return severity as float or raise InvalidSeverityError."""
    if isinstance(severity, bool) or not isinstance(severity, numbers.Real):
        raise InvalidSeverityError(f"Severity must be a number, got {severity!r}")
    value = float(severity)
    if math.isnan(value):
        raise InvalidSeverityError("Severity must not be NaN")
    if not 0.0 <= value <= 1.0:
        raise InvalidSeverityError(f"Severity must be within [0, 1], got {value}")
    return value


class Event(BaseModel):
    """
    A life event targeting one entity, optionally caused by another.

    Direct construction raises the same typed errors as EventBuilder for a
    missing target or an invalid severity.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_event_id)
    event_type: Optional[EventType] = None
    custom_spec: Optional[EventSpec] = None
    source: Optional[str] = None
    target: str = Field(default="", validate_default=True)
    severity: float = DEFAULT_SEVERITY
    timestamp: Optional[datetime] = None

    # InvalidSeverityError and MissingTargetError are not ValueErrors, so
    # pydantic lets them propagate unwrapped
    @field_validator("target", mode="before")
    @classmethod
    def validate_target(cls, v):
        if not v:
            raise MissingTargetError("Event requires a target entity")
        return v

    @field_validator("severity", mode="before")
    @classmethod
    def validate_severity_value(cls, v) -> float:
        return validate_severity(v)

    @model_validator(mode="after")
    def validate_spec_source(self) -> "Event":
        if (self.event_type is None) == (self.custom_spec is None):
            raise ValueError("Exactly one of event_type or custom_spec must be set")
        return self

    def spec(self) -> EventSpec:
        if self.custom_spec is not None:
            return self.custom_spec
        return get_spec(self.event_type)

    @property
    def is_custom(self) -> bool:
        return self.custom_spec is not None

    def summary(self) -> str:
        """Human-readable name, e.g. 'End relationship romantic'."""
        if self.event_type is None:
            return "Custom event"
        return self.event_type.display_name

    def at(self, timestamp: datetime) -> "Event":
        """Copy of this event stamped with `timestamp`."""
        return self.model_copy(update={"timestamp": timestamp})


class EventBuilder:
    """Fluent builder for Event; `build()` raises EventBuildError subclasses."""

    def __init__(self, event_type: Optional[EventType] = None, *, custom_spec: Optional[EventSpec] = None):
        if (event_type is None) == (custom_spec is None):
            raise ValueError("Provide exactly one of event_type or custom_spec")
        self._event_type = EventType(event_type) if event_type is not None else None
        self._custom_spec = custom_spec
        self._source: Optional[str] = None
        self._target: Optional[str] = None
        self._severity = DEFAULT_SEVERITY if custom_spec is None else DEFAULT_CUSTOM_SEVERITY
        self._timestamp: Optional[datetime] = None

    @classmethod
    def custom(cls, spec: EventSpec) -> "EventBuilder":
        return cls(custom_spec=spec)

    def source(self, entity_id: str) -> "EventBuilder":
        self._source = entity_id
        return self

    def target(self, entity_id: str) -> "EventBuilder":
        self._target = entity_id
        return self

    def severity(self, severity: float) -> "EventBuilder":
        self._severity = severity
        return self

    def timestamp(self, timestamp: datetime) -> "EventBuilder":
        self._timestamp = timestamp
        return self

    def build(self) -> Event:
        if not self._target:
            raise MissingTargetError("Event requires a target entity")
        severity = validate_severity(self._severity)
        return Event(
            event_type=self._event_type,
            custom_spec=self._custom_spec,
            source=self._source,
            target=self._target,
            severity=severity,
            timestamp=self._timestamp,
        )
