"""User model: identity fields plus the daily streak pair."""
from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.session import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # null for accounts that only ever signed in through Google
    hashed_password = Column(String(255), nullable=True)
    google_id = Column(String(255), nullable=True, index=True)
    role = Column(String(16), nullable=False, default=ROLE_USER)  # user | admin
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    # reward state, written only by services.streak
    streak = Column(Integer, nullable=False, default=0)
    last_completed_date = Column(Date, nullable=True)

    todos = relationship("Todo", back_populates="user", cascade="all, delete-orphan")
    notes = relationship("Note", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
