# app/schemas/user.py
from typing import Optional
from .base import BaseSchema

class MeOut(BaseSchema):
    id: int
    email: str
    name: Optional[str] = None
    is_verified: bool
