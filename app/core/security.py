"""Password hashing, access/reset JWTs and signed cookie values for the OAuth handshake."""
import base64
import hmac
import hashlib
import time
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# Signed value: base64(value:timestamp).hmac
def _signature(payload: bytes) -> str:
    settings = get_settings()
    return hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def sign_value(value: str) -> str:
    """Sign a short string (e.g. an OAuth state) for storage in a cookie."""
    payload = f"{value}:{int(time.time())}".encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + _signature(payload)


def unsign_value(token: str | None, max_age: int) -> str | None:
    """Return the signed value if the signature is valid and not older than max_age seconds."""
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not hmac.compare_digest(_signature(payload), sig):
            return None
        value, ts = payload.decode("utf-8").rsplit(":", 1)
        if abs(time.time() - int(ts)) > max_age:
            return None
        return value
    except (ValueError, UnicodeDecodeError):
        return None


def create_access_token(subject: str | int, extra: dict[str, Any] | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": str(subject), "exp": expire, "type": "access"}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict | None:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


# Reset tokens are keyed on the current password hash, so changing the
# password invalidates every token issued before the change.
def _reset_key(hashed_password: str | None) -> str:
    return get_settings().secret_key + (hashed_password or "")


def create_reset_token(user_id: int, hashed_password: str | None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.reset_token_expire_minutes)
    to_encode = {"sub": str(user_id), "exp": expire, "type": "reset"}
    return jwt.encode(to_encode, _reset_key(hashed_password), algorithm=settings.algorithm)


def verify_reset_token(token: str, user_id: int, hashed_password: str | None) -> bool:
    """True only for an unexpired reset token issued to this user under its current password."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, _reset_key(hashed_password), algorithms=[settings.algorithm])
    except JWTError:
        return False
    return payload.get("type") == "reset" and payload.get("sub") == str(user_id)
