from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import UserRole
from ...api.deps import require_role
from ...services.user_service import UserService
from ...schemas.user import (
    MessageResponse, UserCreate, UserDetail, UserList, UserMessage, UserResponse, UserUpdate
)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_role([UserRole.ADMIN]))],
)

@router.get("", response_model=UserList)
def list_users(db: Session = Depends(get_db)):
    """List all users, newest first."""
    users = UserService(db).list_users()
    return UserList(users=[UserResponse.model_validate(user) for user in users])

@router.post("", response_model=UserMessage, status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a user with any role."""
    user = UserService(db).create(user_data)
    return UserMessage(message="User created successfully", user=UserResponse.model_validate(user))

@router.get("/{user_id}", response_model=UserDetail)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = UserService(db).get(user_id)
    return UserDetail(user=UserResponse.model_validate(user))

@router.put("/{user_id}", response_model=UserMessage)
def update_user(user_id: int, user_data: UserUpdate, db: Session = Depends(get_db)):
    """Update only the supplied fields."""
    user = UserService(db).update(user_id, user_data)
    return UserMessage(message="User updated successfully", user=UserResponse.model_validate(user))

@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    UserService(db).delete(user_id)
    return {"message": "User removed successfully"}
