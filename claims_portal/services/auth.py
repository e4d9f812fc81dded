from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models.user import User, UserRole

settings = get_settings()


class AuthService:
    """Staff accounts: bcrypt password hashes and JWT bearer tokens."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))

    @staticmethod
    def get_password_hash(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
        claims = dict(data, exp=datetime.utcnow() + lifetime)
        return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    @staticmethod
    def issue_token(user: User) -> str:
        return AuthService.create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})

    @staticmethod
    def decode_token(token: str) -> Optional[dict]:
        try:
            return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        except JWTError:
            return None

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        # Accounts created without a password cannot sign in until one is set
        user = AuthService.get_user_by_email(db, email)
        if not user or not user.password_hash:
            return None
        if not AuthService.verify_password(password, user.password_hash):
            return None
        return user

    @staticmethod
    def record_login(db: Session, user: User) -> None:
        if not user.has_logged_in:
            user.has_logged_in = True
            db.commit()

    @staticmethod
    def create_user(
        db: Session,
        name: str,
        email: str,
        password: Optional[str] = None,
        role: UserRole = UserRole.STAFF,
        phone: Optional[str] = None,
    ) -> User:
        user = User(
            name=name,
            email=email.strip().lower(),
            phone=phone,
            password_hash=AuthService.get_password_hash(password) if password else None,
            role=role.value,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def set_active(db: Session, user: User, active: bool) -> User:
        """Users are deactivated rather than deleted so audit entries keep their actor."""
        user.is_active = active
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()
