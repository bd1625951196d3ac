from typing import Any, Optional
from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from identity_registry.core.config import API_VERSION
from identity_registry.core.database import get_db
from identity_registry.schemas.user_schema import UserListResponse
from identity_registry.services.user_service import UserService
from identity_registry.utils import api_response
from identity_registry.utils.pagination import parse_sort_param

router = APIRouter(prefix=f"/api/{API_VERSION}/users", tags=["Users"])


@router.post("", status_code=201)
def create_user(payload: Any = Body(None), db: Session = Depends(get_db)):
    user = UserService.create_user(db, payload)
    return api_response.success(user, "User created successfully")


@router.get("", response_model=UserListResponse)
def list_users(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    page_size: Optional[str] = Query(None, description="Items per page (1-100)"),
    sort: Optional[str] = Query(None, description="created_at, updated_at, name or email; prefix '-' for descending"),
    db: Session = Depends(get_db),
):
    sort_field, sort_direction = parse_sort_param(sort)
    users, meta = UserService.list_users(db, page, page_size, sort_field, sort_direction)
    return api_response.success_with_meta(users, meta, "Users retrieved successfully")


@router.get("/search", response_model=UserListResponse)
def search_users(
    q: Optional[str] = Query(None, description="Substring of name or email"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    users, meta = UserService.search_users(db, q, page, page_size)
    return api_response.success_with_meta(users, meta, "Search results retrieved successfully")


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = UserService.get_user(db, user_id)
    return api_response.success(user, "User retrieved successfully")


@router.put("/{user_id}")
def update_user(user_id: int, payload: Any = Body(None), db: Session = Depends(get_db)):
    user = UserService.update_user(db, user_id, payload)
    return api_response.success(user, "User updated successfully")


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    UserService.soft_delete_user(db, user_id)
    return api_response.success(None, "User deleted successfully")
