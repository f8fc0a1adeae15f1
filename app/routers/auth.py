"""Auth routes: register, login, password reset, Google sign-in."""
import json
import logging
from typing import Annotated
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from app.core.config import get_settings
from app.core.errors import NotFound, ValidationError
from app.core.security import (
    create_access_token,
    create_reset_token,
    sign_value,
    unsign_value,
    verify_reset_token,
)
from app.routers.deps import DbSession
from app.schemas.user import (
    CredentialsSchema,
    EmailSchema,
    LoginOutSchema,
    MessageSchema,
    NewPasswordSchema,
    UserCreatedSchema,
    UserOutSchema,
)
from app.services import accounts
from app.services.google_oauth import GoogleAuthError, GoogleLoginFlow, get_http_client
from app.services.mailer import Mailer, get_mailer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])
settings = get_settings()


def _frontend_redirect(path: str = "/", **params) -> RedirectResponse:
    url = settings.frontend_url.rstrip("/") + path
    if params:
        url += "?" + urlencode(params)
    return RedirectResponse(url, status_code=303)


@router.post("/register", response_model=UserCreatedSchema, status_code=status.HTTP_201_CREATED)
async def register(body: CredentialsSchema, db: DbSession):
    """Create a password account with the default `user` role."""
    user = await accounts.create_user(db, body.email, body.password)
    return UserCreatedSchema(message="User registered successfully", user=UserOutSchema.model_validate(user))


@router.post("/login", response_model=LoginOutSchema)
async def login(body: CredentialsSchema, db: DbSession):
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")

    user = await accounts.authenticate(db, body.email, body.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    return LoginOutSchema(
        message="Login successful",
        user=UserOutSchema.model_validate(user),
        access_token=create_access_token(user.id),
    )


@router.post("/forgot-password", response_model=MessageSchema)
async def forgot_password(
    body: EmailSchema,
    db: DbSession,
    mailer: Annotated[Mailer, Depends(get_mailer)],
):
    """Mail a reset link valid for `reset_token_expire_minutes`."""
    if not accounts.normalize_email(body.email):
        raise ValidationError("Email is required")

    user = await accounts.get_user_by_email(db, body.email)
    if user is None:
        raise NotFound("User not found")

    token = create_reset_token(user.id, user.hashed_password)
    link = f"{settings.frontend_url.rstrip('/')}/reset-password/{user.id}/{token}"
    await mailer.send_password_reset(user.email, link)
    return MessageSchema(message="Password reset email sent")


@router.post("/reset-password/{user_id}/{token}", response_model=MessageSchema)
async def reset_password(user_id: int, token: str, body: NewPasswordSchema, db: DbSession):
    if not body.password:
        raise ValidationError("Password is required")

    user = await accounts.get_user(db, user_id)
    if not verify_reset_token(token, user.id, user.hashed_password):
        logger.warning("Rejected password reset token for user %s", user_id)
        raise ValidationError("Invalid or expired token")

    await accounts.set_password(db, user, body.password)
    return MessageSchema(message="Password has been reset successfully")


@router.get("/auth/google")
async def google_login():
    """Start Google sign-in; the state travels in a signed cookie."""
    flow = GoogleLoginFlow(settings)
    response = RedirectResponse(flow.authorization_url(), status_code=303)
    response.set_cookie(
        key=settings.oauth_state_cookie_name,
        value=sign_value(flow.state),
        max_age=settings.oauth_state_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return response


@router.get("/auth/google/callback")
async def google_callback(
    request: Request,
    db: DbSession,
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    code: str | None = None,
    state: str | None = None,
):
    """Finish Google sign-in and hand the user and an access token to the client app."""
    stored_state = unsign_value(
        request.cookies.get(settings.oauth_state_cookie_name),
        max_age=settings.oauth_state_max_age,
    )
    try:
        if stored_state is None or not code:
            raise GoogleAuthError("Missing code or state cookie")
        flow = GoogleLoginFlow(settings, state=stored_state)
        flow.check_state(state)
        profile = await flow.fetch_profile(client, code)
    except GoogleAuthError as exc:
        logger.warning("Google sign-in failed: %s", exc)
        response = _frontend_redirect("/", error="oauth")
        response.delete_cookie(settings.oauth_state_cookie_name, path="/")
        return response

    user = await accounts.resolve_google_user(db, profile.email, profile.google_id)
    user_json = json.dumps(UserOutSchema.model_validate(user).model_dump())
    response = _frontend_redirect("/", user=user_json, token=create_access_token(user.id))
    response.delete_cookie(settings.oauth_state_cookie_name, path="/")
    return response
