# app/services/credential_store.py
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from app.models.user import User
from app.models.verification_code import VerificationCode
from app.models.refresh_token import RefreshToken
from app.models.password_reset import PasswordReset


class CredentialStore:
    """Data access for users and their one-time credentials.

    Lookups return the row or ``None``; they never raise for a missing row.
    Writes never commit themselves. Committing is left to :meth:`atomic`, so a
    multi-step change either lands completely or not at all.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        try:
            yield self.db
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # ---------- users ----------
    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def add_user(self, email: str, password_hash: str, name: Optional[str] = None) -> User:
        u = User(email=email, name=name, password_hash=password_hash, is_verified=False)
        self.db.add(u)
        self.db.flush()
        return u

    # ---------- verification codes ----------
    def add_verification_code(self, user_id: int, code: str, expires_at, created_at) -> VerificationCode:
        vc = VerificationCode(user_id=user_id, code=code, expires_at=expires_at, created_at=created_at)
        self.db.add(vc)
        self.db.flush()
        return vc

    def latest_unused_code(self, user_id: int) -> Optional[VerificationCode]:
        return (
            self.db.query(VerificationCode)
            .filter(VerificationCode.user_id == user_id, VerificationCode.used.is_(False))
            .order_by(VerificationCode.created_at.desc(), VerificationCode.id.desc())
            .first()
        )

    def mark_verified(self, user: User, code: VerificationCode) -> None:
        user.is_verified = True
        code.used = True
        self.db.flush()

    def discard_registration(self, user_id: int) -> None:
        # SQLite 는 기본적으로 FK cascade 가 꺼져 있어서 코드부터 지운다
        self.db.query(VerificationCode).filter(VerificationCode.user_id == user_id).delete()
        self.db.query(User).filter(User.id == user_id).delete()

    # ---------- refresh tokens ----------
    def add_refresh_token(self, user_id: int, token_hash: str, expires_at, created_at) -> RefreshToken:
        rt = RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at, created_at=created_at)
        self.db.add(rt)
        self.db.flush()
        return rt

    # ---------- password resets ----------
    def add_password_reset(self, user_id: int, token_hash: str, expires_at, created_at) -> PasswordReset:
        pr = PasswordReset(user_id=user_id, token_hash=token_hash, expires_at=expires_at, created_at=created_at)
        self.db.add(pr)
        self.db.flush()
        return pr

    def latest_unused_reset(self, user_id: int) -> Optional[PasswordReset]:
        return (
            self.db.query(PasswordReset)
            .filter(PasswordReset.user_id == user_id, PasswordReset.used.is_(False))
            .order_by(PasswordReset.created_at.desc(), PasswordReset.id.desc())
            .first()
        )

    def discard_password_reset(self, reset_id: int) -> None:
        self.db.query(PasswordReset).filter(PasswordReset.id == reset_id).delete()

    def apply_password_reset(self, user: User, reset: PasswordReset, password_hash: str) -> None:
        user.password_hash = password_hash
        reset.used = True
        self.db.flush()
