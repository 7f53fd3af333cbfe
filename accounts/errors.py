"""Fehlerklassen für Konten, Sitzung und Backup.

Alle Fehler tragen eine benutzerlesbare Meldung und werden von der
Oberfläche direkt angezeigt; sie werden nie automatisch wiederholt.
"""


class PlannerError(Exception):
    """Basisklasse aller fachlichen Fehler des Kursplaners."""


class MissingCredentials(PlannerError):
    def __init__(self) -> None:
        super().__init__("Bitte Benutzername und Passwort angeben.")


class DuplicateUsername(PlannerError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Benutzername '{username}' existiert bereits.")


class ReservedUsername(PlannerError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Der Benutzername '{username}' ist reserviert.")


class InvalidCredentials(PlannerError):
    def __init__(self) -> None:
        super().__init__("Benutzername oder Passwort ungültig.")


class InvalidBackupFormat(PlannerError):
    def __init__(self, detail: str = "") -> None:
        msg = "Ungültiges Backup-Format"
        super().__init__(f"{msg}: {detail}" if detail else f"{msg}.")


class NotAuthenticated(PlannerError):
    def __init__(self) -> None:
        super().__init__("Nicht angemeldet. Bitte zuerst 'login' oder 'register' ausführen.")


class AdminRequired(PlannerError):
    def __init__(self) -> None:
        super().__init__("Diese Aktion ist nur für den Administrator verfügbar.")


class StorageError(PlannerError):
    def __init__(self, what: str) -> None:
        self.what = what
        super().__init__(
            f"{what} konnte nicht gespeichert werden. "
            f"Speicherplatz und Schreibrechte des Datenverzeichnisses prüfen."
        )
