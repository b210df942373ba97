"""
Custom exceptions for the event simulation engine.
"""


class EventSimError(Exception):
    """Base exception for all event simulation errors."""
    pass


class EventBuildError(EventSimError):
    """Raised when an event cannot be constructed."""
    pass


class MissingTargetError(EventBuildError):
    """Raised when an event is built without a target entity."""
    pass


class InvalidSeverityError(EventBuildError):
    """Raised when severity is outside [0, 1], NaN, or not a number."""
    pass


class MalformedSpecError(EventBuildError):
    """Raised when a custom EventSpec fails validation."""
    pass


class UnknownEventTypeError(EventSimError):
    """Raised when an event type has no registered EventSpec."""
    pass


class TemporalRangeError(EventSimError):
    """Raised when a timestamp falls outside an entity's lifespan."""
    pass


class UnknownEntityError(EventSimError):
    """Raised when an operation references an entity that was never added."""
    pass


class DuplicateEntityError(EventSimError):
    """Raised when an entity id is added twice."""
    pass


class CascadeDepthExceededError(EventSimError):
    """Reported when a dispatch chain exceeds the maximum cascade depth."""

    def __init__(self, depth: int, max_depth: int, chain_id: str):
        self.depth = depth
        self.max_depth = max_depth
        self.chain_id = chain_id
        super().__init__(
            f"Cascade depth {depth} exceeds maximum {max_depth} (chain {chain_id})"
        )
