"""Initialize the database and seed the admin profile."""

from datetime import timedelta

from sqlalchemy.orm import Session

from authentication.auth import create_access_token
from models.config import settings
from repositories.database import Base, SessionLocal, engine
from repositories.db_models import Profile, ProfileRole
from repositories.profile_repository import ProfileRepository

# Console tokens printed at setup are valid for a working day
CONSOLE_TOKEN_LIFETIME = timedelta(hours=12)


def seed_admin(db: Session) -> tuple[Profile, bool]:
    """Ensure the configured admin profile exists and holds the admin role.

    A profile already registered with ADMIN_EMAIL is promoted instead of
    duplicated.

    Returns:
        The admin profile and whether anything was written.
    """
    repo = ProfileRepository(db)
    admin = repo.get_by_email(settings.ADMIN_EMAIL) or repo.get_by_id(
        settings.ADMIN_PROFILE_ID
    )
    if admin is None:
        admin = Profile(
            id=settings.ADMIN_PROFILE_ID,
            email=settings.ADMIN_EMAIL,
            full_name="Administrator",
            role=ProfileRole.ADMIN,
        )
        db.add(admin)
    elif admin.role == ProfileRole.ADMIN:
        return admin, False
    else:
        admin.role = ProfileRole.ADMIN

    db.commit()
    db.refresh(admin)
    return admin, True


def init_db():
    """Create tables and seed default data."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        admin, changed = seed_admin(db)
        if changed:
            print("[OK] Admin profile ready")
            print(f"  Email: {admin.email}")
            print(f"  Profile ID: {admin.id}")

        token = create_access_token(
            admin.id,
            claims={"email": admin.email},
            expires_delta=CONSOLE_TOKEN_LIFETIME,
        )
        print("\nModeration console token (valid 12 hours):")
        print(f"  MODERATION_API_TOKEN={token}")

        print("\n[OK] Database initialization complete!")

    except Exception as e:
        print(f"Error initializing database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
