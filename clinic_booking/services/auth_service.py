from datetime import datetime, timezone
from typing import Optional
import logging
import threading
import uuid

from ..core.config import settings
from ..core.exceptions import AuthError, RegistrationError, RegistrationErrorKind
from ..core.security import SessionIssuer, UserRole, get_password_hash, verify_password
from ..repositories.base import ReservationStore
from ..schemas.auth import TokenResponse
from ..schemas.user import UserInDB

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_ID = "admin-1"

def generate_id(prefix: str) -> str:
    """Generate a prefixed unique id."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"

class AuthService:
    def __init__(
        self,
        store: ReservationStore,
        issuer: SessionIssuer,
        accept_any_password: bool = settings.AUTH_ACCEPT_ANY_PASSWORD,
    ):
        self.store = store
        self.issuer = issuer
        self.accept_any_password = accept_any_password
        self._register_lock = threading.Lock()

        if accept_any_password:
            logger.warning("AUTH_ACCEPT_ANY_PASSWORD is enabled: passwords are not verified")

    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.PATIENT,
        user_id: Optional[str] = None,
    ) -> UserInDB:
        """Register a new user.

        A known email is reported as a duplicate even when other fields are
        empty; empty fields are only checked for a new email.
        """
        with self._register_lock:
            # Check if user already exists
            if email and self.store.get_user_by_email(email):
                raise RegistrationError(
                    RegistrationErrorKind.DUPLICATE_EMAIL, "Email already registered"
                )

            if not name or not email or not password:
                raise RegistrationError(
                    RegistrationErrorKind.MISSING_FIELD, "All fields are required"
                )

            new_user = UserInDB(
                id=user_id or generate_id("user"),
                email=email,
                name=name,
                role=role,
                password_hash=get_password_hash(password),
                created_at=datetime.now(timezone.utc),
            )
            user = self.store.add_user(new_user)

        logger.info(f"Registered {user.role.value} account {user.id}")
        return user

    def authenticate_user(self, email: str, password: str) -> UserInDB:
        """Resolve credentials to a user."""
        user = self.store.get_user_by_email(email)

        if not user or not password:
            raise AuthError()

        if not self.accept_any_password and not verify_password(password, user.password_hash):
            logger.info(f"Failed login for account {user.id}")
            raise AuthError()

        return user

    def register(self, name: str, email: str, password: str, role: UserRole = UserRole.PATIENT) -> TokenResponse:
        """Register and open a session for the new user."""
        user = self.register_user(name, email, password, role)
        return self._token_response(user)

    def login(self, email: str, password: str) -> TokenResponse:
        """Authenticate user and return an access token."""
        user = self.authenticate_user(email, password)
        return self._token_response(user)

    def seed_admin(
        self,
        email: str = settings.DEFAULT_ADMIN_EMAIL,
        name: str = settings.DEFAULT_ADMIN_NAME,
        password: str = settings.DEFAULT_ADMIN_PASSWORD,
    ) -> Optional[UserInDB]:
        """Create the default administrator when no users exist yet."""
        if self.store.count_users() > 0:
            return None

        admin = self.register_user(name, email, password, UserRole.ADMIN, user_id=DEFAULT_ADMIN_ID)
        logger.info(f"Seeded default administrator {admin.email}")
        return admin

    def _token_response(self, user: UserInDB) -> TokenResponse:
        return TokenResponse(
            access_token=self.issuer.issue(user),
            expires_in=self.issuer.expires_in,
            user=user.public(),
        )
