"""
Custom exception classes

Each error carries the HTTP status the API answers with, so routes can raise
domain errors and let the application handler translate them.
"""


class LegitMindError(Exception):
    """Base class for all service errors"""
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class DocumentNotFound(LegitMindError):
    """Raised when a document id is not in the store"""
    status_code = 404

    def __init__(self, document_id: str):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class ContentUnavailable(LegitMindError):
    """Raised when the text of a document is absent from the store"""
    status_code = 404

    def __init__(self, document_id: str):
        super().__init__(f"Content for document {document_id} is not available")
        self.document_id = document_id


class UnsupportedFileType(LegitMindError):
    status_code = 400


class InvalidModelInput(LegitMindError):
    """Raised before calling the model when the request is unusable (empty text or question)"""
    status_code = 400


class ModelInvocationFailed(LegitMindError):
    """The LLM service errored or could not be reached"""
    status_code = 502


class ModelOutputInvalid(LegitMindError):
    """The LLM answered, but the answer does not match the expected schema"""
    status_code = 502


class ModelOverloaded(LegitMindError):
    """Raised after the retry budget for a gateway call is exhausted"""
    status_code = 503

    def __init__(self, operation: str, attempts: int):
        super().__init__(
            f"The model is currently overloaded. {operation} failed after {attempts} attempts, please try again later."
        )
        self.operation = operation
        self.attempts = attempts


class StoragePersistFailed(LegitMindError):
    """A write to the persistent medium failed, the change was not saved"""
    status_code = 507

    def __init__(self, key: str, reason: str):
        super().__init__(f"Could not save '{key}': {reason}")
        self.key = key
        self.reason = reason
