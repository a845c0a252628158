"""
User provisioning endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from volunteer_system.api.deps import to_http_exception
from volunteer_system.errors import StorageError
from volunteer_system.models.base import get_db
from volunteer_system.services.user_service import UserService
from volunteer_system.schemas.user import UserCreate, UserResponse

router = APIRouter(tags=["Users"])


def _to_response(user) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        role_id=user.role_id,
        role_name=user.role.name,
        created_at=user.created_at,
    )


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(
    request: UserCreate,
    db: Session = Depends(get_db),
):
    """Create a user under an existing role."""
    service = UserService(db)
    try:
        user = service.create_user(request)
        db.commit()
        return _to_response(user)
    except (ValueError, StorageError) as e:
        db.rollback()
        raise to_http_exception(e)


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
):
    service = UserService(db)
    try:
        return _to_response(service.get_user(user_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
