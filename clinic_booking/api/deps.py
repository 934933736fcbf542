from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from typing import List

from ..core.security import (
    security, AuthorizationError,
    SessionIdentity, SessionIssuer, UserRole
)
from ..services.auth_service import AuthService
from ..services.reporting_service import ReportingService
from ..services.reservation_service import ReservationService

# Service dependencies, wired once per application in create_app
def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer

def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service

def get_reservation_service(request: Request) -> ReservationService:
    return request.app.state.reservation_service

def get_reporting_service(request: Request) -> ReportingService:
    return request.app.state.reporting_service

async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> SessionIdentity:
    """Extract and verify the session token from the Authorization header.

    An untrusted token raises SessionError, reported with its kind (malformed
    or expired) by the application error handler.
    """
    return issuer.decode(credentials.credentials)

# Role-based access control dependencies
def require_role(allowed_roles: List[UserRole]):
    """Create a dependency that requires specific user roles."""
    async def role_checker(
        identity: SessionIdentity = Depends(get_current_identity)
    ) -> SessionIdentity:
        if identity.role not in allowed_roles:
            raise AuthorizationError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return identity

    return role_checker

async def get_admin_user(
    identity: SessionIdentity = Depends(require_role([UserRole.ADMIN]))
) -> SessionIdentity:
    """Require admin role."""
    return identity
