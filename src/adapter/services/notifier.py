"""
Notifier adapter

Delivers OTP messages over email (SMTP) and SMS (Twilio REST API), with a
bounded retry loop around each send.
"""

import asyncio
import logging
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.mime.text import MIMEText
from typing import Any, Dict, Optional

import httpx

from src.app.services.notifier import INotifier
from src.app.utils.masking import mask_email, mask_phone, mask_sensitive_data
from src.domain.entities import NotificationChannel

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """A single delivery attempt failed"""


class Transport(ABC):
    @abstractmethod
    async def deliver(self, destination: str, payload: Dict[str, Any]) -> None:
        """Send once; raise TransportError on failure"""
        pass


class SmtpEmailTransport(Transport):
    def __init__(
        self,
        smtp_host: str,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        smtp_use_tls: bool = True,
        from_email: Optional[str] = None,
        from_name: str = "Landson",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.smtp_use_tls = smtp_use_tls
        self.from_email = from_email or smtp_user
        self.from_name = from_name

    def _send(self, destination: str, payload: Dict[str, Any]) -> None:
        msg = MIMEText(payload.get("body", ""), "plain")
        msg["Subject"] = payload.get("subject", self.from_name)
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = destination

        context = ssl.create_default_context()
        if self.smtp_use_tls:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                server.starttls(context=context)
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.from_email, destination, msg.as_string())
        else:
            with smtplib.SMTP_SSL(
                self.smtp_host, self.smtp_port, context=context, timeout=30
            ) as server:
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.from_email, destination, msg.as_string())

    async def deliver(self, destination: str, payload: Dict[str, Any]) -> None:
        try:
            # smtplib blocks; keep it off the event loop
            await asyncio.to_thread(self._send, destination, payload)
        except (smtplib.SMTPException, OSError) as exc:
            raise TransportError(f"SMTP delivery failed: {exc}") from exc


class TwilioSmsTransport(Transport):
    API_BASE = "https://api.twilio.com/2010-04-01"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.client = client or httpx.AsyncClient(timeout=10.0)

    async def deliver(self, destination: str, payload: Dict[str, Any]) -> None:
        url = f"{self.API_BASE}/Accounts/{self.account_sid}/Messages.json"
        try:
            response = await self.client.post(
                url,
                data={"To": destination, "From": self.from_number, "Body": payload["body"]},
                auth=(self.account_sid, self.auth_token),
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"Twilio delivery failed: {exc}") from exc

        logger.info(f"SMS accepted by Twilio: sid={response.json().get('sid')}")

    async def close(self) -> None:
        await self.client.aclose()


class LogTransport(Transport):
    """Dev mode: log the message instead of sending it"""

    def __init__(self, channel: NotificationChannel):
        self.channel = channel

    async def deliver(self, destination: str, payload: Dict[str, Any]) -> None:
        if self.channel == NotificationChannel.sms:
            masked = mask_phone(destination)
        else:
            masked = mask_email(destination)
        body = payload.get("body", "")
        logger.info(
            f"[dev {self.channel.value}] to={masked} "
            f"subject={payload.get('subject', '-')} body={mask_sensitive_data(body)}"
        )
        # Unmasked body only at DEBUG so local runs can complete OTP flows
        logger.debug(f"[dev {self.channel.value}] full body: {body}")


class Notifier(INotifier):
    """
    Routes a message to the channel's transport.

    Each send is tried at most retry_attempts times with a fixed delay
    between attempts; the caller only sees the final outcome.
    """

    def __init__(
        self,
        transports: Dict[NotificationChannel, Transport],
        retry_attempts: int = 3,
        retry_delay_seconds: float = 1.0,
    ):
        self.transports = transports
        self.retry_attempts = max(1, retry_attempts)
        self.retry_delay_seconds = retry_delay_seconds

    async def send(
        self,
        destination: str,
        channel: NotificationChannel,
        payload: Dict[str, Any],
    ) -> bool:
        transport = self.transports.get(channel)
        if transport is None:
            logger.error(f"No transport configured for channel {channel.value}")
            return False

        for attempt in range(1, self.retry_attempts + 1):
            try:
                await transport.deliver(destination, payload)
                return True
            except TransportError as exc:
                if attempt < self.retry_attempts:
                    logger.warning(
                        f"Failed to send {channel.value}, retrying "
                        f"({attempt}/{self.retry_attempts}): {mask_sensitive_data(str(exc))}"
                    )
                    await asyncio.sleep(self.retry_delay_seconds)
                else:
                    logger.error(
                        f"Failed to send {channel.value} after {self.retry_attempts} "
                        f"attempts: {mask_sensitive_data(str(exc))}"
                    )
        return False

    async def close(self) -> None:
        for transport in self.transports.values():
            if isinstance(transport, TwilioSmsTransport):
                await transport.close()


def build_notifier(config) -> Notifier:
    """Live transports when NOTIFIER_BACKEND is "live", log transports otherwise"""
    if config.NOTIFIER_BACKEND == "live":
        transports: Dict[NotificationChannel, Transport] = {
            NotificationChannel.email: SmtpEmailTransport(
                smtp_host=config.SMTP_HOST,
                smtp_port=int(config.SMTP_PORT),
                smtp_user=config.SMTP_USER,
                smtp_password=config.SMTP_PASSWORD,
                smtp_use_tls=config.SMTP_USE_TLS,
                from_email=config.MAIL_FROM,
                from_name=config.APP_NAME,
            ),
            NotificationChannel.sms: TwilioSmsTransport(
                account_sid=config.TWILIO_ACCOUNT_SID,
                auth_token=config.TWILIO_AUTH_TOKEN,
                from_number=config.TWILIO_PHONE_NUMBER,
            ),
        }
    else:
        transports = {
            NotificationChannel.email: LogTransport(NotificationChannel.email),
            NotificationChannel.sms: LogTransport(NotificationChannel.sms),
        }
    return Notifier(
        transports,
        retry_attempts=int(config.NOTIFIER_RETRY_ATTEMPTS),
        retry_delay_seconds=float(config.NOTIFIER_RETRY_DELAY_SECONDS),
    )
