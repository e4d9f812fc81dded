import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User, UserRole
from ..schemas.auth import Token
from ..schemas.user import UserResponse
from ..services.auth import AuthService
from ..services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

STAFF_ROLES = {UserRole.ADMIN.value, UserRole.STAFF.value, UserRole.SUPERUSER.value}
ADMIN_ROLES = {UserRole.ADMIN.value, UserRole.SUPERUSER.value}

auth_rate_limiter = RateLimiter(max_requests=10, window_seconds=300)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if not token:
        return None
    payload = AuthService.decode_token(token)
    if not payload:
        return None
    user_id = payload.get("sub")
    if not user_id:
        return None
    user = AuthService.get_user_by_id(db, int(user_id))
    if not user or not user.is_active:
        return None
    return user


def require_auth(
    current_user: Optional[User] = Depends(get_current_user),
) -> User:
    if not current_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


def require_staff(
    current_user: User = Depends(require_auth),
) -> User:
    if current_user.role not in STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff access required",
        )
    return current_user


def require_admin(
    current_user: User = Depends(require_auth),
) -> User:
    if current_user.role not in ADMIN_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.post("/login", response_model=Token)
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    client_ip = request.client.host if request.client else "unknown"
    allowed, remaining = auth_rate_limiter.is_allowed(client_ip)
    if not allowed:
        logger.warning(f"Auth rate limit exceeded: ip={client_ip}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please try again later.",
        )
    auth_rate_limiter.record_request(client_ip)

    user = AuthService.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        logger.info(f"Failed login attempt: email={form_data.username} ip={client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is deactivated",
        )
    AuthService.record_login(db, user)
    logger.info(f"Successful login: user_id={user.id} role={user.role} ip={client_ip}")
    return Token(access_token=AuthService.issue_token(user))


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(require_auth)):
    return current_user
