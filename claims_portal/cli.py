import sys

from .config import get_settings
from .database import SessionLocal
from .models.user import UserRole
from .services.auth import AuthService


def seed_admin():
    settings = get_settings()

    if not settings.admin_password:
        print("ERROR: ADMIN_PASSWORD environment variable is required.")
        print("Set it in your .env file or export it before running this command.")
        sys.exit(1)

    db = SessionLocal()
    try:
        existing = AuthService.get_user_by_email(db, settings.admin_email)
        if existing:
            print(f"Admin user already exists: {settings.admin_email}")
            print("No changes made. This is expected if you've already run this command.")
            return

        user = AuthService.create_user(
            db,
            name=settings.admin_name,
            email=settings.admin_email,
            password=settings.admin_password,
            role=UserRole.ADMIN,
        )
        print(f"Created admin user: {user.email} (role: {user.role})")
    finally:
        db.close()


if __name__ == "__main__":
    seed_admin()
