"""Errors raised by the catalog domain model."""


class CatalogError(Exception):
    """Base class for all catalog-related errors."""

    def __init__(self, kind: str, key: str, message: str | None = None) -> None:
        if message is None:
            message = f"{kind} ({key}) catalog error"
        super().__init__(message)
        self.kind = kind
        self.key = key


class InvalidEntryError(CatalogError):
    """Raised when a catalog entry violates domain invariants."""

    def __init__(self, kind: str, key: str, reason: str) -> None:
        super().__init__(kind, key, f"invalid {kind} ({key}): {reason}")
        self.reason = reason


class UnknownCategoryError(CatalogError):
    """Raised when a course references a category that does not exist."""

    def __init__(self, key: str, category_code: str) -> None:
        super().__init__(
            "course", key, f"course ({key}) references unknown category {category_code}"
        )
        self.category_code = category_code
