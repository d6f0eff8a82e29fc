"""Base exception classes for the motion domain layer."""


class AssemblyError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the application.

    Subclasses:
    - MotionActionError: a member action was rejected
    - MotionNotFoundError: no motion with the requested id
    - InvalidStateTransitionError: internal state machine violation
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
