from fastapi import APIRouter, Depends, status

from ...api.deps import get_auth_service, get_current_identity
from ...core.security import SessionIdentity
from ...services.auth_service import AuthService
from ...schemas.auth import TokenResponse
from ...schemas.user import UserLogin, UserRegister

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user and open a session."""
    return auth_service.register(
        user_data.name, user_data.email, user_data.password, user_data.role
    )

@router.post("/login", response_model=TokenResponse)
def login(
    login_data: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Authenticate user and return an access token."""
    return auth_service.login(login_data.email, login_data.password)

@router.post("/logout")
async def logout(
    identity: SessionIdentity = Depends(get_current_identity)
):
    """Acknowledge logout.

    Sessions are stateless: the client discards its token, which otherwise
    remains valid until it expires.
    """
    return {"message": "Successfully logged out"}

@router.get("/me", response_model=SessionIdentity)
async def get_current_user_info(
    identity: SessionIdentity = Depends(get_current_identity)
):
    """Get current session identity."""
    return identity

@router.post("/verify-token")
async def verify_token_endpoint(
    identity: SessionIdentity = Depends(get_current_identity)
):
    """Verify if token is valid."""
    return {
        "valid": True,
        "user_id": identity.id,
        "email": identity.email,
        "role": identity.role,
        "expires": identity.expires_at,
    }
