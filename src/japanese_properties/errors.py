"""
Exception Hierarchy

Domain errors raised by the store and the ingestion pipeline. The API layer
turns each of them into a structured client error.
"""
from typing import Optional


class PropertyNotFoundError(LookupError):
    """Raised when an id is absent from the current store generation."""

    def __init__(self, property_id: int):
        self.property_id = property_id
        super().__init__(f"Property not found: {property_id}")


class IngestError(Exception):
    """Base exception for CSV ingestion failures."""

    code = "ingest_error"

    def __init__(self, detail: str, row: Optional[int] = None, line: Optional[int] = None):
        self.detail = detail
        self.row = row
        self.line = line
        super().__init__(detail)

    def to_dict(self) -> dict:
        """Payload returned to API clients."""
        return {
            "error": self.code,
            "detail": self.detail,
            "row": self.row,
            "line": self.line,
        }


class MalformedCSVError(IngestError):
    """Raised when the upload is not readable as CSV or its header is wrong."""

    code = "malformed_csv"


class InvalidRowError(IngestError):
    """Raised when a single data row fails shape or type validation."""

    code = "invalid_row"

    def __init__(self, row: int, reason: str, line: Optional[int] = None):
        self.reason = reason
        super().__init__(f"Row {row}: {reason}", row=row, line=line)


class UploadTooLargeError(IngestError):
    """Raised when the uploaded body exceeds the configured size limit."""

    code = "upload_too_large"
