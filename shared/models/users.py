import uuid
from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, DateTime, String, Uuid
from passlib.context import CryptContext

from shared.core.database import AuthBase
from shared.utils.enums import UserRole

# bcrypt default cost is 12 rounds
bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')


def utcnow():
    return datetime.now(timezone.utc)


class Users(AuthBase):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_name = Column(String(150), nullable=False)
    email = Column(String(150), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=UserRole.NORMAL.value)
    phone = Column(String(20), nullable=True)
    is_account_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True),
                        default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)  # ✅ Soft delete field

    def set_password(self, password: str):
        self.password = bcrypt_context.hash(password)

    def verify_password(self, password: str) -> bool:
        return bcrypt_context.verify(password, self.password)
