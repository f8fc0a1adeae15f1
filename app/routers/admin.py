"""Admin routes: usage overview and provisioning other admins."""
from fastapi import APIRouter, status

from app.models.user import ROLE_ADMIN
from app.routers.deps import AdminUser, DbSession
from app.schemas.user import AdminUserRowSchema, CredentialsSchema, UserCreatedSchema, UserOutSchema
from app.services.accounts import create_user, list_users_with_counts

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[AdminUserRowSchema])
async def list_users(db: DbSession, admin: AdminUser):
    return await list_users_with_counts(db)


@router.post("/users", response_model=UserCreatedSchema, status_code=status.HTTP_201_CREATED)
async def create_admin(body: CredentialsSchema, db: DbSession, admin: AdminUser):
    user = await create_user(db, body.email, body.password, role=ROLE_ADMIN)
    return UserCreatedSchema(message="Admin created successfully", user=UserOutSchema.model_validate(user))
