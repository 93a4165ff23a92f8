from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import AuthBase, AuthSessionLocal, auth_engine
from shared.models.users import Users
from shared.utils.enums import UserRole


def seed_admin(db: Session):
    """Create the first admin from settings unless an admin already exists."""
    existing_admin = (
        db.query(Users)
        .filter(
            Users.role == UserRole.ADMIN.value,
            Users.deleted_at.is_(None)
        )
        .first()
    )
    if existing_admin:
        return existing_admin, False

    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        raise ValueError("ADMIN_EMAIL and ADMIN_PASSWORD must be set")

    admin = Users(
        user_name=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL.lower(),
        role=UserRole.ADMIN.value,
        is_account_verified=True,
    )
    admin.set_password(settings.ADMIN_PASSWORD)

    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin, True


if __name__ == "__main__":
    AuthBase.metadata.create_all(bind=auth_engine)
    db = AuthSessionLocal()

    try:
        admin, created = seed_admin(db)
        if created:
            print("Admin created successfully:", admin.email)
        else:
            print("Admin already exists:", admin.email)
    except Exception as e:
        db.rollback()
        print("Error creating admin:", str(e))
    finally:
        db.close()
