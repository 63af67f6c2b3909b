"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class InvalidEventError(DomainError):
    """Raised when an event record violates a domain invariant."""

    def __init__(self, event_id: str, reason: str) -> None:
        super().__init__(f"Invalid event ({event_id}): {reason}")
        self.event_id = event_id
        self.reason = reason


class InvalidPatchError(DomainError):
    """Raised when a patch cannot be applied to an event."""

    def __init__(self, event_id: str, field: str, reason: str) -> None:
        super().__init__(f"Invalid patch for event ({event_id}) field {field}: {reason}")
        self.event_id = event_id
        self.field = field


class InvalidTransitionError(DomainError):
    """Raised when a gesture is in an invalid state for the attempted action."""


# ============================================================================
#                          Gesture related errors
# ============================================================================


class GestureInProgressError(InvalidTransitionError):
    """Raised when a gesture starts while another one holds the same target."""

    def __init__(self, target: str) -> None:
        super().__init__(f"A gesture is already in progress for {target}.")
        self.target = target


class NoActiveGestureError(InvalidTransitionError):
    """Raised when a pointer update or release arrives with no active gesture."""

    def __init__(self) -> None:
        super().__init__("No gesture is in progress.")


class GestureReleasedError(InvalidTransitionError):
    """Raised when a released gesture is updated or committed again."""

    def __init__(self, base_id: str) -> None:
        super().__init__(f"Gesture for event {base_id} has already been released.")
        self.base_id = base_id
