from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the center workbook importer.

ImportConfig carries the knobs the engine needs (sheet name aliases, the
fallback student password, bcrypt cost, the default payment description);
DatabaseConfig is the connection fallback used by the CLI when neither .env
nor the process environment provide one.
"""

GROUPS = "groups"
STUDENTS = "students"
PAYMENTS = "payments"

DEFAULT_SHEET_ALIASES: dict[str, tuple[str, ...]] = {
    GROUPS: ("Groups", "Guruhlar", "Group"),
    STUDENTS: ("Students", "O'quvchilar", "Oquvchilar", "Student"),
    PAYMENTS: ("Payments", "To'lovlar", "Tolovlar", "Payment"),
}

# Sheet name reported in row errors when the logical sheet was not located
DEFAULT_SHEET_LABELS: dict[str, str] = {
    GROUPS: "Groups",
    STUDENTS: "Students",
    PAYMENTS: "Payments",
}

DEFAULT_STUDENT_PASSWORD = "lms1234"
DEFAULT_PASSWORD_ROUNDS = 12
DEFAULT_PAYMENT_DESCRIPTION = "Oylik to‘lov"


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for one import run."""
    sheet_aliases: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_SHEET_ALIASES)
    )
    default_student_password: str = DEFAULT_STUDENT_PASSWORD
    password_rounds: int = DEFAULT_PASSWORD_ROUNDS  # bcrypt cost factor
    default_payment_description: str = DEFAULT_PAYMENT_DESCRIPTION
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    def aliases_for(self, logical_sheet: str) -> tuple[str, ...]:
        return self.sheet_aliases.get(logical_sheet, DEFAULT_SHEET_ALIASES[logical_sheet])
