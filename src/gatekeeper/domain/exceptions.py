"""Domain exceptions."""


class GatekeeperError(Exception):
    """Base exception for Gatekeeper."""

    pass


class NotFound(GatekeeperError):
    """Requested resource was not found."""

    def __init__(self, entity: str, key: object = None) -> None:
        self.entity = entity
        self.key = key
        message = f"{entity} not found" if key is None else f"{entity} not found: {key}"
        super().__init__(message)


class ValidationError(GatekeeperError):
    """Validation failed for input data."""

    pass


class Conflict(GatekeeperError):
    """A concurrent writer changed the same record; the caller should retry."""

    pass
