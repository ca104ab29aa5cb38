# app/services/mailer.py
from email.message import EmailMessage
import smtplib

import structlog

from app.core.config import Settings

logger = structlog.get_logger(__name__)


class Notifier:
    """Sends a plain-text email. Any failure is raised to the caller."""

    def send(self, to_address: str, subject: str, body: str) -> None:
        raise NotImplementedError


class SmtpNotifier(Notifier):
    def __init__(self, host: str, port: int, username: str = "", password: str = "",
                 sender: str = "no-reply@localhost", use_tls: bool = False, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(self, to_address: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to_address
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def send(self, to_address: str, subject: str, body: str) -> None:
        msg = self.build_message(to_address, subject, body)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)
        logger.info("mail_sent", to=to_address, subject=subject)


class LogNotifier(Notifier):
    """Local development: write the mail to the log instead of sending it."""

    def send(self, to_address: str, subject: str, body: str) -> None:
        logger.info("mail_logged", to=to_address, subject=subject, body=body)


def build_notifier(cfg: Settings) -> Notifier:
    if not cfg.MAIL_HOST:
        return LogNotifier()
    return SmtpNotifier(
        host=cfg.MAIL_HOST,
        port=cfg.MAIL_PORT,
        username=cfg.MAIL_USER,
        password=cfg.MAIL_PASS,
        sender=cfg.MAIL_FROM,
        use_tls=cfg.MAIL_USE_TLS,
        timeout=cfg.MAIL_TIMEOUT,
    )
