"""
Custom Exception Hierarchy
Domain and application-level exceptions
"""


class DomainException(Exception):
    """Base exception for all domain errors"""
    pass


class ValidationException(DomainException):
    """Data validation failed"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class RepositoryException(DomainException):
    """Database operation failed"""
    pass


class ResourceNotFoundException(DomainException):
    """Requested resource not found"""

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class InvalidStageException(ValidationException):
    """Stage string is neither a standard stage nor an interview round"""

    def __init__(self, stage: object):
        self.stage = stage
        super().__init__("stage", f"'{stage}' is not a valid application stage")


class InvalidTimestampException(ValidationException):
    """Timestamp is missing its timezone or is out of order"""

    def __init__(self, message: str, field: str = "timestamp"):
        super().__init__(field, message)


class InvalidRoundException(InvalidTimestampException):
    """Interview round number is not a positive integer within the storable range"""

    def __init__(self, round_number: object):
        self.round_number = round_number
        super().__init__(
            f"round number must be a positive integer, got {round_number!r}",
            field="round_number",
        )


class NoOpTransitionException(DomainException):
    """Target stage equals the current stage"""

    def __init__(self, application_id: object, stage: str):
        self.application_id = application_id
        self.stage = stage
        super().__init__(f"Application {application_id} is already in stage '{stage}'")


class InvalidStateException(DomainException):
    """Interview round operation not allowed from the round's current status"""

    def __init__(self, operation: str, status: str):
        self.operation = operation
        self.status = status
        super().__init__(f"Cannot {operation} an interview round in status '{status}'")


class RecomputeFailure(DomainException):
    """Derived last-activity timestamp could not be recomputed"""

    def __init__(self, application_id: object, attempts: int, cause: Exception):
        self.application_id = application_id
        self.attempts = attempts
        self.cause = cause
        super().__init__(
            f"Recompute of last_activity_at for {application_id} failed after {attempts} attempt(s): {cause}"
        )
