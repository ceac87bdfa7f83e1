"""Exception types raised by the finance tracker."""

from __future__ import annotations


class FinanceTrackerError(Exception):
    """Base class for every error surfaced to callers."""


class ValidationError(FinanceTrackerError, ValueError):
    """A record carries values the ledgers refuse to store."""


class SystemCategoryError(FinanceTrackerError):
    """Attempt to delete a category shared by the system."""

    def __init__(self, message: str = "Impossible de supprimer une catégorie système.") -> None:
        super().__init__(message)


class ImportFormatError(FinanceTrackerError):
    """A backup document could not be understood; nothing was written."""

    def __init__(self, message: str = "Le format des données est invalide.") -> None:
        super().__init__(message)


class AuthError(FinanceTrackerError):
    pass


class InvalidPinError(AuthError):
    def __init__(self, message: str = "Code PIN incorrect") -> None:
        super().__init__(message)


class PinMismatchError(AuthError):
    def __init__(self, message: str = "Les codes ne correspondent pas") -> None:
        super().__init__(message)
