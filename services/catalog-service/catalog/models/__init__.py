# services/catalog-service/catalog/models/__init__.py
from .catalog import (
    Writer,
    Publication,
    PublicationCreate,
    PublicationUpdate,
    WriterSummary,
    PublicationSummary,
    SeedStatistics,
)

__all__ = [
    "Writer",
    "Publication",
    "PublicationCreate",
    "PublicationUpdate",
    "WriterSummary",
    "PublicationSummary",
    "SeedStatistics",
]
