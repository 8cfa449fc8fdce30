import hmac
import logging

from ..config.config import settings
from ..db.persistent_slot import PersistentSlot
from .entity_collection import ServiceError

logger = logging.getLogger(__name__)


class AuthenticationError(ServiceError):
    """Raised when the login credentials do not match."""
    pass


class AuthService:
    """
    Single-admin login gate backed by the persisted 'auth' flag.
    """

    def __init__(self, auth_slot: PersistentSlot[bool], admin_email: str = None, admin_password: str = None):
        self.auth_slot = auth_slot
        self.admin_email = admin_email or settings.ADMIN_EMAIL
        self.admin_password = admin_password or settings.ADMIN_PASSWORD

    async def login(self, email: str, password: str) -> None:
        email_ok = hmac.compare_digest(email.strip().lower().encode(), self.admin_email.lower().encode())
        password_ok = hmac.compare_digest(password.encode(), self.admin_password.encode())
        if not (email_ok and password_ok):
            logger.warning(f"Failed login attempt for '{email}'.")
            raise AuthenticationError("E-mail ou senha incorretos. Por favor, tente novamente.")
        await self.auth_slot.save(True)
        logger.info(f"User '{email}' logged in.")

    async def logout(self) -> None:
        await self.auth_slot.save(False)
        logger.info("User logged out.")

    async def is_authenticated(self) -> bool:
        return await self.auth_slot.load()
