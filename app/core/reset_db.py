import structlog

from app.core.db import Base, engine
from app.models.user import User  # noqa: F401
from app.models.verification_code import VerificationCode  # noqa: F401
from app.models.refresh_token import RefreshToken  # noqa: F401
from app.models.password_reset import PasswordReset  # noqa: F401

logger = structlog.get_logger(__name__)


def init_db(bind=engine):
    Base.metadata.create_all(bind=bind)


# 한번만 실행하는 스크립트
def reset_db(bind=engine):
    logger.warning("db_reset_started", url=str(bind.url))
    Base.metadata.drop_all(bind=bind, checkfirst=True)
    Base.metadata.create_all(bind=bind)
    logger.warning("db_reset_done", tables=sorted(Base.metadata.tables.keys()))

if __name__ == "__main__":
    from app.core.config import settings
    from app.core.logging import configure_logging

    configure_logging(settings.LOG_LEVEL)
    reset_db()
