# services/catalog-service/catalog/core/errors.py
from __future__ import annotations

from enum import Enum
from typing import Optional


class CatalogError(Exception):
    """
    Base class for failures the catalog reports to its callers.
    `code` is surfaced to GraphQL clients as `extensions.code`.
    """

    code: str = "CATALOG_ERROR"
    default_message: str = "Catalog operation failed."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidIdentifier(CatalogError):
    """A publication or writer id is not a well-formed ObjectId."""

    code = "INVALID_IDENTIFIER"
    default_message = "Publication identifier format is invalid"


class PublicationNotFound(CatalogError):
    code = "PUBLICATION_NOT_FOUND"
    default_message = "Publication not found in catalog."


class WriterNotFound(CatalogError):
    code = "WRITER_NOT_FOUND"
    default_message = "Selected writer not found in our database."


class DuplicateIdentifier(CatalogError):
    """The ISBN-13 is already used by another publication."""

    code = "DUPLICATE_IDENTIFIER"
    default_message = "This publication identifier already exists in our catalog."


class InvalidPublicationInput(CatalogError):
    code = "INVALID_PUBLICATION_INPUT"
    default_message = "Publication fields are invalid."

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class ConnectionFailureCause(str, Enum):
    HOST_RESOLUTION = "host_resolution"
    AUTHENTICATION = "authentication"
    REFUSED = "refused"
    TLS = "tls"
    UNKNOWN = "unknown"


_CONNECTION_MESSAGES = {
    ConnectionFailureCause.HOST_RESOLUTION: (
        "Database hostname resolution failed. Verify network connectivity and connection string."
    ),
    ConnectionFailureCause.AUTHENTICATION: "Database authentication rejected. Verify credentials.",
    ConnectionFailureCause.REFUSED: "Database connection refused. Ensure database service is running.",
    ConnectionFailureCause.TLS: "Secure connection failed. Check SSL/TLS configuration.",
}


class DatabaseConnectionFailure(CatalogError):
    code = "DATABASE_UNAVAILABLE"
    default_message = "Unable to establish database connection."

    def __init__(self, cause: ConnectionFailureCause, detail: Optional[str] = None) -> None:
        message = _CONNECTION_MESSAGES.get(cause)
        if message is None:
            message = f"Database connection error: {detail}" if detail else self.default_message
        super().__init__(message)
        self.cause = cause
        self.detail = detail
