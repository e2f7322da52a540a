from typing import Optional
from fastapi import APIRouter, Depends
from controller.users import UserOp
from schema import SuccessOut
from schema.users import UserCreate, UserDetailOut, UserOut, UserUpdate
from service.auth import verify_access_token
from util.enum import UserRole

router = APIRouter(tags=["Users"])


@router.post("/users", response_model=UserOut, status_code=201)
def create_user(
    data: UserCreate,
    auth_data: dict = Depends(verify_access_token),
):
    UserOp.ensure_role(auth_data.get("user_id"), UserRole.admin)
    return UserOp.create_user(data)


@router.get("/users", response_model=list[UserOut])
def search_users(
    query: Optional[str] = None,
    auth_data: dict = Depends(verify_access_token),
):
    """
    Search users by name, email, student code or major
    - Admins see everyone, teachers see students only
    """
    actor = UserOp.get_user_by_id(auth_data.get("user_id"))
    return UserOp.search_users(actor, query or "")


@router.get("/users/{user_id}", response_model=UserDetailOut)
def get_user(
    user_id: int,
    auth_data: dict = Depends(verify_access_token),
):
    actor = UserOp.ensure_role(
        auth_data.get("user_id"), UserRole.admin, UserRole.teacher
    )
    return UserOp.get_user_detail(actor, user_id)


@router.put("/users/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    data: UserUpdate,
    auth_data: dict = Depends(verify_access_token),
):
    UserOp.ensure_role(auth_data.get("user_id"), UserRole.admin)
    return UserOp.update_user(user_id, data)


@router.delete("/users/{user_id}", response_model=SuccessOut)
def delete_user(
    user_id: int,
    auth_data: dict = Depends(verify_access_token),
):
    UserOp.ensure_role(auth_data.get("user_id"), UserRole.admin)
    UserOp.delete_user(user_id)
    return {"message": "User deleted successfully"}
