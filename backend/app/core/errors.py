"""Error taxonomy shared by the store, provider client and orchestrator."""


class AppError(Exception):
    pass


class ValidationError(AppError):
    """Malformed or out-of-range input. Maps to HTTP 400."""

    def __init__(self, field: str, detail: str):
        super().__init__(f"{field}: {detail}")
        self.field = field
        self.detail = detail

    def to_details(self) -> list[dict]:
        return [{"field": self.field, "msg": self.detail}]


class NotFoundError(AppError):
    """A referenced conversation or message does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class ProviderError(AppError):
    """The AI provider could not produce a reply after all attempts."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class StoreError(AppError):
    """Unexpected persistence failure."""
