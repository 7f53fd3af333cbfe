"""Konten, Sitzung und Fehlerklassen."""

from accounts.errors import (
    AdminRequired,
    DuplicateUsername,
    InvalidBackupFormat,
    InvalidCredentials,
    MissingCredentials,
    NotAuthenticated,
    PlannerError,
    ReservedUsername,
    StorageError,
)

__all__ = [
    "AdminRequired",
    "DuplicateUsername",
    "InvalidBackupFormat",
    "InvalidCredentials",
    "MissingCredentials",
    "NotAuthenticated",
    "PlannerError",
    "ReservedUsername",
    "StorageError",
]
