class DraftingError(Exception):
    """Base class for errors raised by the drafting tools."""


class ValidationError(DraftingError):
    """Input document is malformed, incomplete or inconsistent."""


class SessionCapacityError(DraftingError):
    """Serialized session payload would exceed the configured maximum."""

    def __init__(self, max_size: int, attempted_size: int) -> None:
        super().__init__(
            f"Session size limit exceeded. Max: {max_size}, Attempted: {attempted_size}"
        )
        self.max_size = max_size
        self.attempted_size = attempted_size


class SessionStoreError(DraftingError):
    """The session storage backend failed."""
