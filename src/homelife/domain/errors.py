"""Domain error taxonomy."""


class HomeLifeError(Exception):
    """Base class for errors raised by domain services."""


class ValidationError(HomeLifeError):
    """Malformed or out-of-range input."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(HomeLifeError):
    """Entity is absent or not owned by the caller's household."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity


class ConflictError(HomeLifeError):
    """A concurrent write kept winning against this one."""


class ExternalDependencyError(HomeLifeError):
    """An outbound collaborator (AI provider, webhook) failed."""
