from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from fastapi import HTTPException, status
from fastapi.security import HTTPBearer
from pydantic import BaseModel, ValidationError
from enum import Enum
import logging

from .config import settings
from .exceptions import SessionError, SessionErrorKind

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# Bearer credentials for protected routes
security = HTTPBearer()

class UserRole(str, Enum):
    ADMIN = "admin"
    PATIENT = "patient"

class SessionIdentity(BaseModel):
    """Identity carried by a verified session token."""

    id: str
    email: str
    name: str
    role: UserRole
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

class SessionIssuer:
    """Mints and checks signed, time-bounded session tokens.

    Tokens are stateless JWTs: nothing is persisted server side, so a token
    stays valid until it expires even after the holder logs out.
    """

    def __init__(
        self,
        secret_key: str = settings.SECRET_KEY,
        algorithm: str = settings.ALGORITHM,
        ttl: timedelta = timedelta(hours=settings.SESSION_TTL_HOURS),
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl

    @property
    def expires_in(self) -> int:
        return int(self.ttl.total_seconds())

    def issue(self, user, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed token for ``user`` (anything with id/email/name/role)."""
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.ttl)

        role = user.role.value if isinstance(user.role, UserRole) else str(user.role)
        to_encode = {
            "sub": user.id,
            "email": user.email,
            "name": user.name,
            "role": role,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> SessionIdentity:
        """Decode and check a token, raising SessionError when it is unusable."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise SessionError(SessionErrorKind.EXPIRED, "Session has expired") from exc
        except JWTError as exc:
            raise SessionError(SessionErrorKind.MALFORMED, "Invalid session token") from exc

        try:
            return SessionIdentity(
                id=payload["sub"],
                email=payload["email"],
                name=payload["name"],
                role=payload["role"],
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise SessionError(SessionErrorKind.MALFORMED, "Invalid session token") from exc

    def verify(self, token: str) -> Optional[SessionIdentity]:
        """Return the identity for a valid token, None otherwise."""
        try:
            return self.decode(token)
        except SessionError as exc:
            logger.debug(f"Rejected session token: {exc.kind.value}")
            return None

# Security exceptions
class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Not enough permissions"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )
