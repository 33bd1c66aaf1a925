import asyncio
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from gowheels.core.config import Settings
from gowheels.core.logger import logger
from gowheels.models.booking import ConfirmationEmail, StoredBooking
from gowheels.models.errors import NotificationError


def format_email_date(value: datetime) -> str:
    """Formats a date like 'Wed Jun 10 2025'."""
    return value.strftime("%a %b %d %Y")


def build_confirmation_email(
    booking: StoredBooking,
    company_name: str = "Go Wheels",
    cars_page_url: str = "",
) -> ConfirmationEmail:
    """
    Builds the confirmation sent to the customer after a booking is stored.
    """
    cars_link = ""
    if cars_page_url:
        cars_link = f'<p>Check available cars: <a href="{escape(cars_page_url)}" target="_blank">View Cars 🚘</a></p>'

    html = f"""
    <h2>Booking Confirmed ✅</h2>
    <p><strong>Name:</strong> {escape(booking.name)}</p>
    <p><strong>Car Model:</strong> {escape(booking.carModel)}</p>
    <p><strong>Phone:</strong> {escape(booking.phone)}</p>
    <p><strong>Pickup Date:</strong> {format_email_date(booking.pickupDate)}</p>
    <p><strong>Return Date:</strong> {format_email_date(booking.returnDate)}</p>
    {cars_link}
    <p>Best Regards,<br><strong>{escape(company_name)} Team</strong></p>
    """

    return ConfirmationEmail(
        to=booking.email,
        subject=f"Your Booking Is Confirmed - {company_name}",
        html=html,
    )


class EmailNotifier:
    """Sends HTML emails over SMTP (SSL on 465 by default, STARTTLS otherwise)."""

    def __init__(self, settings: Settings):
        self.server = settings.SMTP_SERVER
        self.port = settings.SMTP_PORT
        self.use_ssl = settings.SMTP_USE_SSL
        self.username = settings.SMTP_USERNAME
        self.password = settings.SMTP_PASSWORD
        self.sender = settings.sender_address
        self.timeout = settings.EMAIL_TIMEOUT_SECONDS

    def _connect(self) -> smtplib.SMTP:
        if not self.username or not self.password:
            raise NotificationError("SMTP credentials missing (SMTP_USERNAME / SMTP_PASSWORD).")

        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.server, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.server, self.port, timeout=self.timeout)
            server.starttls()
        server.login(self.username, self.password)
        return server

    def _send_sync(self, message: ConfirmationEmail):
        msg = MIMEMultipart()
        msg['From'] = self.sender
        msg['To'] = message.to
        msg['Subject'] = message.subject
        msg.attach(MIMEText(message.html, 'html'))

        try:
            server = self._connect()
            try:
                server.sendmail(self.sender, message.to, msg.as_string())
            finally:
                server.quit()
        except NotificationError:
            raise
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP delivery to {message.to} failed: {e}") from e

    async def send(self, message: ConfirmationEmail):
        """
        Sends the email. smtplib blocks, so the work runs in a thread.
        Raises NotificationError if the message could not be delivered.
        """
        await asyncio.to_thread(self._send_sync, message)
        logger.info(f"📧 Email sent to: {message.to}")

    def _verify_sync(self):
        try:
            server = self._connect()
            server.quit()
        except NotificationError:
            raise
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(str(e)) from e

    async def verify(self) -> bool:
        """Startup check: logs whether the SMTP login works. Never raises."""
        try:
            await asyncio.to_thread(self._verify_sync)
            logger.info("✅ SMTP ready to send emails")
            return True
        except Exception as e:
            logger.error(f"⚠ SMTP Error: {e}")
            return False
