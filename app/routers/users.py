from fastapi import APIRouter, Depends
from app.models.user import User
from app.schemas.user import MeOut
from app.core.auth import get_current_user

router = APIRouter(prefix="/api/users", tags=["users"])

@router.get("/me", response_model=MeOut)
def get_me(current: User = Depends(get_current_user)):
    return current
