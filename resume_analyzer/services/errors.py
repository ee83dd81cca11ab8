from enum import Enum


class ErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    STORAGE_FAILURE = "storage_failure"
    NOT_FOUND = "not_found"
    UNSUPPORTED_FORMAT = "unsupported_format"
    CORRUPT_DOCUMENT = "corrupt_document"
    UNREACHABLE_SOURCE = "unreachable_source"
    UNSUPPORTED_URL = "unsupported_url"
    SERVICE_UNAVAILABLE = "service_unavailable"
    QUOTA_EXCEEDED = "quota_exceeded"
    MALFORMED_RESPONSE = "malformed_response"


class AnalysisError(Exception):
    """Base exception for every failure inside the analysis pipeline."""

    kind: ErrorKind


class InvalidRequest(AnalysisError):
    """Raised when a required request field is missing."""

    kind = ErrorKind.INVALID_REQUEST


# ---------- Document store ----------
class StorageFailure(AnalysisError):
    """Raised when an upload cannot be written to the storage medium."""

    kind = ErrorKind.STORAGE_FAILURE


class NotFound(AnalysisError):
    """Raised when an artifact was never stored or was already released."""

    kind = ErrorKind.NOT_FOUND


# ---------- Text extraction ----------
class UnsupportedFormat(AnalysisError):
    """Raised when the upload is not a document type we can read."""

    kind = ErrorKind.UNSUPPORTED_FORMAT


class CorruptDocument(AnalysisError):
    """Raised when the document looks right but cannot be parsed."""

    kind = ErrorKind.CORRUPT_DOCUMENT


# ---------- Job description ----------
class UnreachableSource(AnalysisError):
    kind = ErrorKind.UNREACHABLE_SOURCE


class UnsupportedURL(AnalysisError):
    kind = ErrorKind.UNSUPPORTED_URL


# ---------- Model invocation ----------
class ServiceUnavailable(AnalysisError):
    """Raised on transport failures or when the model call misses its deadline."""

    kind = ErrorKind.SERVICE_UNAVAILABLE


class QuotaExceeded(AnalysisError):
    kind = ErrorKind.QUOTA_EXCEEDED


class MalformedResponse(AnalysisError):
    """Raised when a model reply has no candidate text."""

    kind = ErrorKind.MALFORMED_RESPONSE
