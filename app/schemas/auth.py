# app/schemas/auth.py
from typing import Optional
from pydantic import ConfigDict
from .base import BaseSchema

# 필수값 검사는 서비스에서 한다 (누락 시 400)

class RegisterIn(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class VerifyIn(BaseSchema):
    # 숫자로 보내도 문자열 코드로 받는다
    model_config = ConfigDict(coerce_numbers_to_str=True)

    email: Optional[str] = None
    code: Optional[str] = None


class LoginIn(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None


class ResetRequestIn(BaseSchema):
    email: Optional[str] = None


class ResetPasswordIn(BaseSchema):
    email: Optional[str] = None
    token: Optional[str] = None
    new_password: Optional[str] = None


class MessageOut(BaseSchema):
    message: str


class AuthUserOut(BaseSchema):
    id: int
    email: str
    name: Optional[str] = None


class LoginOut(BaseSchema):
    access_token: str
    refresh_token: str
    user: AuthUserOut
