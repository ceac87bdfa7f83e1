"""Local PIN gate and the persisted session.

The PIN is a 4 to 6 digit code kept alongside the data.  It only gates the
local device; it is not a security boundary.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import config
from .errors import AuthError, InvalidPinError, PinMismatchError
from .models import Session, User
from .storage import Storage

logger = logging.getLogger(__name__)

STEP_CREATE = 'create'
STEP_CONFIRM = 'confirm'
STEP_VERIFY = 'verify'


def is_valid_pin(pin: str) -> bool:
    return (
        isinstance(pin, str)
        and pin.isdigit()
        and config.PIN_MIN_LENGTH <= len(pin) <= config.PIN_MAX_LENGTH
    )


class PinAuthenticator:
    """Walks through PIN creation, confirmation and verification."""

    def __init__(self, storage: Storage):
        self.storage = storage
        self._pending: Optional[str] = None
        self.step = STEP_VERIFY if self.stored_pin() else STEP_CREATE

    def stored_pin(self) -> Optional[str]:
        value = self.storage.load_value(config.PIN_KEY)
        return str(value) if value else None

    def create(self, pin: str) -> None:
        """First entry of a new PIN; must be followed by :meth:`confirm`."""
        if self.step != STEP_CREATE:
            raise AuthError("A PIN already exists")
        if not is_valid_pin(pin):
            raise InvalidPinError(
                f"Choisissez un code de {config.PIN_MIN_LENGTH} à {config.PIN_MAX_LENGTH} chiffres"
            )
        self._pending = pin
        self.step = STEP_CONFIRM

    def confirm(self, pin: str) -> Session:
        if self.step != STEP_CONFIRM:
            raise AuthError("No PIN awaiting confirmation")
        if pin != self._pending:
            self._pending = None
            self.step = STEP_CREATE
            raise PinMismatchError()
        self.storage.save_value(config.PIN_KEY, pin)
        self._pending = None
        self.step = STEP_VERIFY
        logger.info("PIN created")
        return self._complete()

    def verify(self, pin: str) -> Session:
        if self.step != STEP_VERIFY:
            raise AuthError("No PIN has been created yet")
        if pin != self.stored_pin():
            logger.info("Rejected PIN attempt")
            raise InvalidPinError()
        return self._complete()

    def current_session(self) -> Optional[Session]:
        """Restore the session persisted by the last successful login."""
        data = self.storage.load_value(config.AUTH_KEY)
        if not isinstance(data, dict):
            return None
        try:
            return Session(user=User.from_dict(data))
        except KeyError:
            return None

    def logout(self) -> None:
        self.storage.delete(config.AUTH_KEY)

    def _complete(self) -> Session:
        user = User.from_dict(config.LOCAL_USER)
        self.storage.save_value(config.AUTH_KEY, user.to_dict())
        self.storage.save(config.USER_KEY, [user.to_dict()])
        return Session(user=user)
