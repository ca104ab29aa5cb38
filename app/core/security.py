from datetime import datetime, timedelta, timezone
import secrets
from typing import Optional

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.hash import argon2

from app.core.config import settings
from app.core.errors import InvalidTokenError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes even for timezone=True columns."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _hasher():
    return argon2.using(
        time_cost=settings.PASSWORD_HASH_TIME_COST,
        memory_cost=settings.PASSWORD_HASH_MEMORY_COST,
        parallelism=settings.PASSWORD_HASH_PARALLELISM,
    )


def hash_password(plain: str) -> str:
    return _hasher().hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return argon2.verify(plain, hashed)
    except ValueError:
        # 해시 형식이 깨진 경우
        return False


# refresh / reset 토큰도 같은 느린 해시로 저장하고 비교한다
hash_secret = hash_password
verify_secret = verify_password


def create_access_token(sub: str, now: Optional[datetime] = None) -> str:
    now = now or utcnow()
    exp = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(sub), "iat": now, "exp": exp}
    return jwt.encode(payload, settings.JWT_ACCESS_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_ACCESS_SECRET, algorithms=[settings.JWT_ALG], options={"verify_aud": False})
    except ExpiredSignatureError:
        raise InvalidTokenError("Token expired", code="TOKEN_EXPIRED")
    except JWTError:
        raise InvalidTokenError()
    if not payload.get("sub"):
        raise InvalidTokenError()
    return payload


def generate_refresh_token() -> str:
    return secrets.token_hex(settings.REFRESH_TOKEN_BYTES)


def generate_reset_token() -> str:
    return secrets.token_hex(settings.RESET_TOKEN_BYTES)


def generate_verification_code() -> str:
    # 100000 ~ 999999 균등 분포
    return str(100000 + secrets.randbelow(900000))


def codes_match(submitted: str, expected: str) -> bool:
    return secrets.compare_digest(submitted.encode(), expected.encode())
