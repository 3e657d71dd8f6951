"""Custom exception hierarchy for staffdesk."""


class StaffdeskError(Exception):
    """Base exception for staffdesk."""
    pass


class NotFoundError(StaffdeskError):
    """Raised when a name- or id-based lookup finds no record.

    Carries up to a handful of candidate names; when any exist they are
    appended to the message as a "Did you mean" clause.
    """

    def __init__(self, entity: str, name: str, suggestions: list[str] | None = None):
        self.entity = entity
        self.name = name
        self.suggestions = list(suggestions or [])
        message = f'{entity} "{name}" not found.'
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += " Please check the name and try again."
        super().__init__(message)


class ValidationFailedError(StaffdeskError):
    """Raised when tool arguments are rejected before any store access."""
    pass


class UnknownOperationError(StaffdeskError):
    """Raised when a tool name has no handler (catalog/dispatcher mismatch)."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown function: {name}")


class StorageError(StaffdeskError):
    """Raised when the document database fails or a target document is missing."""
    pass
