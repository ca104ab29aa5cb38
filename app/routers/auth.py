from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.core.rate_limit import (
    LOGIN_LIMITER,
    RESET_REQUEST_LIMITER,
    VERIFY_LIMITER,
    auth_rate_limit,
    client_ip,
)
from app.schemas.auth import (
    RegisterIn,
    VerifyIn,
    LoginIn,
    ResetRequestIn,
    ResetPasswordIn,
    MessageOut,
    LoginOut,
)
from app.services.auth import CredentialService
from app.services.credential_store import CredentialStore
from app.services.mailer import Notifier, build_notifier

router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(auth_rate_limit)])


def get_notifier() -> Notifier:
    return build_notifier(settings)


def get_credential_service(
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> CredentialService:
    return CredentialService(CredentialStore(db), notifier, settings)


@router.post("/register", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, svc: CredentialService = Depends(get_credential_service)):
    svc.register(payload.email, payload.password, payload.name)
    return {"message": "User registered. Check email for verification code."}


@router.post("/verify", response_model=MessageOut)
def verify(payload: VerifyIn, svc: CredentialService = Depends(get_credential_service)):
    VERIFY_LIMITER.enforce(payload.email)
    svc.verify(payload.email, payload.code)
    VERIFY_LIMITER.reset(payload.email)
    return {"message": "User verified successfully"}


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, svc: CredentialService = Depends(get_credential_service)):
    LOGIN_LIMITER.enforce(payload.email)
    result = svc.login(payload.email, payload.password)
    LOGIN_LIMITER.reset(payload.email)
    return result


@router.post("/request-reset", response_model=MessageOut)
def request_reset(payload: ResetRequestIn, request: Request, svc: CredentialService = Depends(get_credential_service)):
    RESET_REQUEST_LIMITER.enforce(client_ip(request))
    svc.request_password_reset(payload.email)
    return {"message": "Password reset email sent"}


@router.post("/reset-password", response_model=MessageOut)
def reset_password(payload: ResetPasswordIn, svc: CredentialService = Depends(get_credential_service)):
    svc.reset_password(payload.email, payload.token, payload.new_password)
    return {"message": "Password updated successfully"}
