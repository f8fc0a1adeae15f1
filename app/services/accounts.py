"""Account creation, credential checks, Google sign-in resolution and the bootstrap admin."""
import logging
import re

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.errors import NotFound, ValidationError
from app.core.security import hash_password, verify_password
from app.models.note import Note
from app.models.todo import Todo
from app.models.user import ROLE_ADMIN, ROLE_USER, User

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt hard limit


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def validate_password(password: str | None) -> str:
    pwd = password or ""
    if not pwd:
        raise ValidationError("Password is required")
    if len(pwd) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(pwd.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return pwd


def validate_email(email: str | None) -> str:
    email_norm = normalize_email(email)
    if not email_norm:
        raise ValidationError("Email is required")
    if not EMAIL_RE.match(email_norm):
        raise ValidationError("Invalid email")
    return email_norm


async def get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, email: str, password: str, role: str = ROLE_USER) -> User:
    """Validate credentials and insert a password account with the given role."""
    email_norm = validate_email(email)
    pwd = validate_password(password)

    if await get_user_by_email(db, email_norm):
        raise ValidationError("Email already registered")

    user = User(email=email_norm, hashed_password=hash_password(pwd), role=role, streak=0)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Created %s account %s (id=%s)", role, user.email, user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password or "", user.hashed_password):
        logger.warning("Failed login for %s", normalize_email(email))
        return None
    return user


async def set_password(db: AsyncSession, user: User, password: str) -> None:
    user.hashed_password = hash_password(validate_password(password))
    await db.commit()
    logger.info("Password changed for user %s", user.id)


async def resolve_google_user(db: AsyncSession, email: str, google_id: str) -> User:
    """Find the account for a verified Google e-mail, creating a plain user if there is none."""
    email_norm = normalize_email(email)
    user = await get_user_by_email(db, email_norm)
    if user is None:
        user = User(email=email_norm, google_id=google_id, role=ROLE_USER, streak=0)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info("Created account %s from Google sign-in (id=%s)", email_norm, user.id)
    elif not user.google_id:
        user.google_id = google_id
        await db.commit()
    return user


async def list_users_with_counts(db: AsyncSession) -> list[dict]:
    """Every user with the number of todos and notes they own, ordered by id."""
    tasks = (
        select(Todo.user_id, func.count(Todo.id).label("tasks_count"))
        .group_by(Todo.user_id)
        .subquery()
    )
    notes = (
        select(Note.user_id, func.count(Note.id).label("notes_count"))
        .group_by(Note.user_id)
        .subquery()
    )
    result = await db.execute(
        select(
            User,
            func.coalesce(tasks.c.tasks_count, 0),
            func.coalesce(notes.c.notes_count, 0),
        )
        .outerjoin(tasks, tasks.c.user_id == User.id)
        .outerjoin(notes, notes.c.user_id == User.id)
        .order_by(User.id.asc())
    )
    return [
        {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "created_at": user.created_at,
            "streak": user.streak or 0,
            "last_completed_date": user.last_completed_date,
            "tasks_count": tasks_count,
            "notes_count": notes_count,
        }
        for user, tasks_count, notes_count in result.all()
    ]


async def seed_admin(db: AsyncSession, settings: Settings) -> User | None:
    """Create the bootstrap admin from settings if configured and not present yet."""
    if not settings.admin_email or not settings.admin_password:
        return None
    existing = await get_user_by_email(db, settings.admin_email)
    if existing is not None:
        return existing
    return await create_user(db, settings.admin_email, settings.admin_password, role=ROLE_ADMIN)
