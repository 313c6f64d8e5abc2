"""Domain models for the center workbook importer.

This package contains the value objects passed between the excel layer, the
phase processors and the persistence layer.
"""

from .config_models import DatabaseConfig, ImportConfig
from .entities import Center, Group, Payment, PaymentKey, PaymentStatus, Subject, User, UserRole
from .error_record import RowError
from .import_result import ImportResult, ImportSummary
from .row_data import RowData

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    # Persistent entities
    "Center",
    "Group",
    "Payment",
    "PaymentKey",
    "PaymentStatus",
    "Subject",
    "User",
    "UserRole",
    # Processing models
    "RowData",
    "RowError",
    "ImportResult",
    "ImportSummary",
]
