"""
User credentials and role assignments.

Roles live in their own table so the admin check is a single indexed
lookup (see services/access_service.py).
"""

from sqlalchemy import Column, String, Boolean, ForeignKey, UniqueConstraint, CheckConstraint

from eventhub.db.base import Base, TimestampMixin, new_id


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class UserRole(Base, TimestampMixin):
    __tablename__ = "user_roles"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="user")

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_role"),
        CheckConstraint("role IN ('admin', 'user')", name="check_user_role"),
    )

    def __repr__(self) -> str:
        return f"<UserRole(user={self.user_id}, role={self.role})>"
