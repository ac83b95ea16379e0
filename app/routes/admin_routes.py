from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import MANAGE_TENANTS, RoleMasks
from app.database import get_db
from app.dependencies import get_role_masks, require_permission
from app.services.admin_service import AdminService
from app.schemas.admin_schemas import (
    TenantCreate,
    TenantResponse,
    TenantUpdate,
    UserCreate,
    UserUpdate,
)
from app.schemas.auth_schemas import UserResponse

# Every admin route requires MANAGE_TENANTS
router = APIRouter(dependencies=[Depends(require_permission(MANAGE_TENANTS))])


def get_admin_service(
    db: Session = Depends(get_db), role_masks: RoleMasks = Depends(get_role_masks)
) -> AdminService:
    return AdminService(db, role_masks)


# Tenants


@router.post("/tenants", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(data: TenantCreate, service: AdminService = Depends(get_admin_service)):
    """Create a tenant. Subdomains are unique."""
    return service.create_tenant(data)


@router.get("/tenants", response_model=list[TenantResponse])
async def list_tenants(service: AdminService = Depends(get_admin_service)):
    return service.list_tenants()


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
async def get_tenant(tenant_id: int, service: AdminService = Depends(get_admin_service)):
    return service.get_tenant(tenant_id)


@router.put("/tenants/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: int, data: TenantUpdate, service: AdminService = Depends(get_admin_service)
):
    return service.update_tenant(tenant_id, data)


@router.delete("/tenants/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(tenant_id: int, service: AdminService = Depends(get_admin_service)):
    service.delete_tenant(tenant_id)
    return None


# Users


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, service: AdminService = Depends(get_admin_service)):
    """
    Create a user in a tenant.

    Pass either a raw ``permission`` mask or a ``role`` name.
    Email and phone must be unique.
    """
    user = service.create_user(data)
    return UserResponse.from_user(user, service.role_masks)


@router.get("/users", response_model=list[UserResponse])
async def list_users(service: AdminService = Depends(get_admin_service)):
    users = service.list_users()
    return [UserResponse.from_user(user, service.role_masks) for user in users]


@router.get("/users/tenant/{tenant_id}", response_model=list[UserResponse])
async def list_users_by_tenant(tenant_id: int, service: AdminService = Depends(get_admin_service)):
    users = service.list_users_by_tenant(tenant_id)
    return [UserResponse.from_user(user, service.role_masks) for user in users]


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, service: AdminService = Depends(get_admin_service)):
    user = service.get_user(user_id)
    return UserResponse.from_user(user, service.role_masks)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int, data: UserUpdate, service: AdminService = Depends(get_admin_service)
):
    user = service.update_user(user_id, data)
    return UserResponse.from_user(user, service.role_masks)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, service: AdminService = Depends(get_admin_service)):
    """Delete a user and revoke all of their sessions"""
    service.delete_user(user_id)
    return None
