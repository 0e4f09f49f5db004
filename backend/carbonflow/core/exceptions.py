"""Domain errors raised by the project store and calculators."""


class CarbonFlowError(Exception):
    """Base error for the project engine."""

    pass


class NotFoundError(CarbonFlowError):
    """A project or compliance step id is not known."""

    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type.capitalize()} '{resource_id}' not found")


class InvalidTransitionError(CarbonFlowError):
    """An action targeted something whose computed status is locked."""

    def __init__(self, target: str, status: str):
        self.target = target
        self.status = status
        super().__init__(f"'{target}' is {status} and cannot be used yet")


class PersistenceCorruptionError(CarbonFlowError):
    """The stored document does not deserialize into the expected shape."""

    def __init__(self, message: str, revision: int = 0):
        self.revision = revision
        super().__init__(message)


class ConflictError(CarbonFlowError):
    """The stored document changed since this store last read or wrote it."""

    def __init__(self, expected_revision: int, actual_revision: int | None):
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision
        super().__init__(
            f"Store document revision mismatch: expected {expected_revision}, "
            f"found {actual_revision}"
        )
