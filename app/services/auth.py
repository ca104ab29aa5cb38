# app/services/auth.py
from datetime import datetime, timedelta
from typing import Callable, Optional
from urllib.parse import urlencode

import structlog
from sqlalchemy.exc import IntegrityError

from app.core.config import Settings, settings as default_settings
from app.core.errors import (
    ConflictError,
    ConfigurationError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidOrExpiredError,
    NotFoundError,
    NotificationError,
    ValidationError,
)
from app.core.security import (
    as_utc,
    codes_match,
    create_access_token,
    generate_refresh_token,
    generate_reset_token,
    generate_verification_code,
    hash_password,
    hash_secret,
    utcnow,
    verify_password,
    verify_secret,
)
from app.models.user import User
from app.services.credential_store import CredentialStore
from app.services.mailer import Notifier

logger = structlog.get_logger(__name__)


def _is_expired(expires_at: datetime, now: datetime) -> bool:
    # 만료 시각과 같으면 만료로 본다
    return as_utc(expires_at) <= now


def _require(message: str, *values) -> None:
    if not all(values):
        raise ValidationError(message, code="MISSING_FIELDS")


class CredentialService:
    """Register -> verify -> login, plus the password-reset flow.

    All state lives in the store; an instance is cheap and is built per
    request. ``clock`` returns an aware UTC datetime and exists for tests.
    """

    def __init__(self, store: CredentialStore, notifier: Notifier,
                 cfg: Optional[Settings] = None, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.notifier = notifier
        self.cfg = cfg or default_settings
        self.clock = clock

    def _notify(self, event: str, to_address: str, subject: str, body: str, discard: Callable[[], None]) -> None:
        """Send after the rows are committed; no store lock is held meanwhile.

        In strict mode a failed send removes what was just committed through
        ``discard`` and raises, so the caller can retry from scratch.
        """
        try:
            self.notifier.send(to_address, subject, body)
        except Exception as exc:
            logger.warning("notification_failed", notification=event, to=to_address, error=str(exc),
                           fail_soft=self.cfg.MAIL_FAIL_SOFT)
            if self.cfg.MAIL_FAIL_SOFT:
                return
            with self.store.atomic():
                discard()
            raise NotificationError() from exc

    def register(self, email: Optional[str], password: Optional[str], name: Optional[str] = None) -> User:
        _require("Email and password are required", email, password)

        if self.store.get_user_by_email(email):
            raise ConflictError()

        password_hash = hash_password(password)
        now = self.clock()
        code = generate_verification_code()

        try:
            with self.store.atomic():
                user = self.store.add_user(email=email, password_hash=password_hash, name=name)
                self.store.add_verification_code(
                    user_id=user.id,
                    code=code,
                    expires_at=now + timedelta(minutes=self.cfg.VERIFICATION_CODE_EXPIRE_MINUTES),
                    created_at=now,
                )
                user_id = user.id
        except IntegrityError:
            # 동시에 같은 이메일로 가입한 경우
            raise ConflictError()

        self._notify("register", email, "Your verification code", f"Your verification code is: {code}",
                     discard=lambda: self.store.discard_registration(user_id))

        logger.info("user_registered", user_id=user_id)
        logger.debug("verification_code_issued", email=email, code=code)
        return user

    def verify(self, email: Optional[str], code: Optional[str]) -> User:
        _require("Email and code are required", email, code)

        user = self.store.get_user_by_email(email)
        if not user:
            raise NotFoundError()

        record = self.store.latest_unused_code(user.id)
        if not record or _is_expired(record.expires_at, self.clock()) or not codes_match(code, record.code):
            raise InvalidOrExpiredError("Invalid or expired code")

        with self.store.atomic():
            self.store.mark_verified(user, record)

        logger.info("user_verified", user_id=user.id)
        return user

    def login(self, email: Optional[str], password: Optional[str]) -> dict:
        _require("Email and password are required", email, password)

        user = self.store.get_user_by_email(email)
        if not user:
            logger.info("login_rejected", reason="unknown_email")
            raise InvalidCredentialsError()
        if not user.is_verified:
            logger.info("login_rejected", reason="not_verified", user_id=user.id)
            raise ForbiddenError()
        if not user.password_hash:
            logger.error("login_rejected", reason="no_password_hash", user_id=user.id)
            raise ConfigurationError()
        if not verify_password(password, user.password_hash):
            logger.info("login_rejected", reason="bad_password", user_id=user.id)
            raise InvalidCredentialsError()

        now = self.clock()
        access = create_access_token(sub=str(user.id), now=now)
        refresh = generate_refresh_token()

        with self.store.atomic():
            self.store.add_refresh_token(
                user_id=user.id,
                token_hash=hash_secret(refresh),
                expires_at=now + timedelta(days=self.cfg.REFRESH_TOKEN_EXPIRE_DAYS),
                created_at=now,
            )

        logger.info("login_succeeded", user_id=user.id)
        return {"access_token": access, "refresh_token": refresh, "user": user}

    def reset_link(self, email: str, token: str) -> str:
        query = urlencode({"token": token, "email": email})
        return f"{self.cfg.FRONTEND_URL.rstrip('/')}/reset-password?{query}"

    def request_password_reset(self, email: Optional[str]) -> None:
        _require("Email is required", email)

        user = self.store.get_user_by_email(email)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        token = generate_reset_token()
        now = self.clock()

        with self.store.atomic():
            reset = self.store.add_password_reset(
                user_id=user.id,
                token_hash=hash_secret(token),
                expires_at=now + timedelta(minutes=self.cfg.PASSWORD_RESET_EXPIRE_MINUTES),
                created_at=now,
            )
            user_id, reset_id = user.id, reset.id

        self._notify("request_reset", email, "Reset your password",
                     f"Click here to reset: {self.reset_link(email, token)}",
                     discard=lambda: self.store.discard_password_reset(reset_id))

        logger.info("password_reset_requested", user_id=user_id)

    def reset_password(self, email: Optional[str], token: Optional[str], new_password: Optional[str]) -> None:
        _require("Email, token, and new password are required", email, token, new_password)

        user = self.store.get_user_by_email(email)
        if not user:
            raise NotFoundError()

        record = self.store.latest_unused_reset(user.id)
        if not record or _is_expired(record.expires_at, self.clock()):
            raise InvalidOrExpiredError()
        if not verify_secret(token, record.token_hash):
            raise InvalidOrExpiredError()

        new_hash = hash_password(new_password)
        with self.store.atomic():
            self.store.apply_password_reset(user, record, new_hash)

        logger.info("password_reset_completed", user_id=user.id)
