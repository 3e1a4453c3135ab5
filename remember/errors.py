"""Error kinds raised by the core services.

Routers never build HTTP errors for these themselves; ``remember.main``
registers exception handlers that turn them into JSON responses.
"""


class RememberError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationError(RememberError):
    """Client-fixable problem with an upload or request payload."""

    status_code = 400
    code = "validation_error"


class InvalidNameError(ValidationError):
    code = "missing_extension"


class NotFoundError(RememberError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class StorageError(RememberError):
    """Writing or deleting bytes under the upload root failed."""

    status_code = 500
    code = "storage_error"


class ExtractionWarning(UserWarning):
    """Metadata could only be partially read. Never escapes the extractor."""
