# backend/utils/mailer.py
import smtplib
from email.message import EmailMessage
from urllib.parse import urljoin

from fastapi.concurrency import run_in_threadpool

from config import settings


class Mailer:
    def __init__(self):
        # SMTP account used for all outbound mail
        self.host = settings.MAIL_HOST
        self.port = settings.MAIL_PORT
        self.user = settings.MAIL_USER
        self.password = settings.MAIL_PASSWORD
        self.sender = settings.MAIL_FROM or settings.MAIL_USER
        self.verify_base_url = urljoin(settings.BACKEND_URL, "/register/verify/")

    def verification_link(self, token: str) -> str:
        return self.verify_base_url + token

    def build_verification_message(self, to: str, token: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = "Email Verification"
        message.set_content(
            f"Click on the following link to verify your email: {self.verification_link(token)}"
        )
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            smtp.starttls()
            smtp.login(self.user, self.password)
            smtp.send_message(message)

    async def send_verification(self, to: str, token: str) -> None:
        """Deliver the verification mail; raises on any transport failure."""
        message = self.build_verification_message(to, token)
        await run_in_threadpool(self._deliver, message)


mailer = Mailer()


def get_mailer() -> Mailer:
    return mailer
