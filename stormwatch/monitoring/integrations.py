"""
Notification Integrations — e-mail, webhook and log-only alert delivery.

Every integration implements one coroutine, ``send_alert``. The dispatcher
calls each one independently; raising signals a failed delivery.
"""

from email.mime.text import MIMEText
from typing import Optional, Protocol, Sequence

import aiosmtplib
import httpx
import structlog

from stormwatch.config import Settings
from stormwatch.exceptions import DeliveryError, IntegrationNotConfiguredError
from stormwatch.monitoring.schemas import StormStatus
from stormwatch.services.subscribers import SubscriberStore
from stormwatch.services.url_guard import validate_webhook_url

logger = structlog.get_logger(__name__)


class Integration(Protocol):
    """Anything that can accept and deliver a storm alert."""

    async def send_alert(
        self,
        message: str,
        station_id: str,
        intensity: float,
        category: str,
        details: Optional[StormStatus] = None,
    ) -> None:
        ...


def integration_name(integration: Integration) -> str:
    return getattr(integration, "name", type(integration).__name__)


# ── Log-only ───────────────────────────────────────────────────────────


class LogIntegration:
    """Writes the alert to the structured log. Always available."""

    name = "log"

    async def send_alert(
        self,
        message: str,
        station_id: str,
        intensity: float,
        category: str,
        details: Optional[StormStatus] = None,
    ) -> None:
        logger.warning(
            "storm_alert",
            station_id=station_id,
            category=category,
            intensity=round(intensity, 2),
            alert_level=details.alert_level.value if details else None,
            message=message,
        )


# ── Email ──────────────────────────────────────────────────────────────


class EmailIntegration:
    """
    Sends one plain-text e-mail per subscriber over SMTP.

    A failure for one recipient is logged and the remaining recipients are
    still attempted. Raises DeliveryError only when every recipient failed.
    """

    name = "email"

    def __init__(
        self,
        subscribers: SubscriberStore,
        smtp_host: str,
        smtp_port: int = 587,
        smtp_user: str = "",
        smtp_password: str = "",
        use_tls: bool = False,
        from_email: str = "alerts@stormwatch.local",
    ):
        self._subscribers = subscribers
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password
        self._use_tls = use_tls
        self._from_email = from_email

    async def send_alert(
        self,
        message: str,
        station_id: str,
        intensity: float,
        category: str,
        details: Optional[StormStatus] = None,
    ) -> None:
        if not self._smtp_host:
            raise IntegrationNotConfiguredError("No SMTP host configured")

        subscribers = await self._subscribers.aget_subscribers()
        if not subscribers:
            logger.info("email_alert_no_subscribers", station_id=station_id)
            return

        logger.info(
            "email_alert_sending",
            station_id=station_id,
            recipients=len(subscribers),
        )

        subject = f"Storm Alert: {category} Rain Event"
        body = (
            f"Heavy rain detected at station {station_id}. "
            f"Intensity: {intensity:.2f} in/hr. Severity: {category}.\n\n"
            f"{message}\n"
        )

        failures = 0
        for sub in subscribers:
            msg = MIMEText(body)
            msg["Subject"] = subject
            msg["From"] = self._from_email
            msg["To"] = sub.email
            try:
                await aiosmtplib.send(
                    msg,
                    hostname=self._smtp_host,
                    port=self._smtp_port,
                    username=self._smtp_user or None,
                    password=self._smtp_password or None,
                    use_tls=self._use_tls,
                    start_tls=False if self._use_tls else None,
                )
                logger.info("email_alert_sent", station_id=station_id, to=sub.email)
            except (aiosmtplib.SMTPException, OSError) as e:
                failures += 1
                logger.error(
                    "email_alert_failed",
                    station_id=station_id,
                    to=sub.email,
                    error=str(e),
                )

        if failures == len(subscribers):
            raise DeliveryError(f"All {failures} e-mail deliveries failed")


# ── Webhook ────────────────────────────────────────────────────────────


class WebhookIntegration:
    """
    POSTs a JSON payload to a webhook URL.

    Discord webhook URLs get an embed payload; anything else receives the
    generic (Slack-compatible) shape.
    """

    name = "webhook"

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = url
        self._timeout = timeout
        self._client = client

    async def send_alert(
        self,
        message: str,
        station_id: str,
        intensity: float,
        category: str,
        details: Optional[StormStatus] = None,
    ) -> None:
        is_valid, reason = validate_webhook_url(self._url)
        if not is_valid:
            logger.warning("webhook_ssrf_blocked", url=self._url, reason=reason)
            raise DeliveryError(f"Webhook URL blocked: {reason}")

        payload = self.build_payload(self._url, message, station_id, intensity, category, details)

        if self._client is not None:
            response = await self._client.post(self._url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, json=payload)

        if response.status_code >= 400:
            logger.warning(
                "webhook_alert_failed",
                station_id=station_id,
                url=self._url,
                status=response.status_code,
            )
            raise DeliveryError(f"HTTP {response.status_code}")

        logger.info(
            "webhook_alert_sent",
            station_id=station_id,
            url=self._url,
            status=response.status_code,
        )

    @staticmethod
    def build_payload(
        url: str,
        message: str,
        station_id: str,
        intensity: float,
        category: str,
        details: Optional[StormStatus] = None,
    ) -> dict:
        alert_level = details.alert_level.value if details else None
        if "discord.com/api/webhooks" in url:
            return {
                "username": "Stormwatch",
                "content": message,
                "embeds": [{
                    "title": f"{category} rain event at {station_id}",
                    "color": 0xFF0000 if alert_level == "Critical" else 0xFFCC00,
                    "fields": [
                        {"name": "Intensity", "value": f"{intensity:.2f} in/hr", "inline": True},
                        {"name": "Alert level", "value": alert_level or "-", "inline": True},
                    ],
                }],
            }
        return {
            "text": message,
            "station_id": station_id,
            "category": category,
            "intensity": round(intensity, 2),
            "alert_level": alert_level,
            "details": details.model_dump(by_alias=True, mode="json") if details else None,
        }


# ── Factory ────────────────────────────────────────────────────────────


def build_integrations(
    settings: Settings,
    subscribers: Optional[SubscriberStore] = None,
) -> Sequence[Integration]:
    """Integrations enabled by configuration. The log sink is always on."""
    integrations: list[Integration] = [LogIntegration()]
    if settings.alert_log_only:
        return integrations

    if settings.email_configured:
        integrations.append(
            EmailIntegration(
                subscribers=subscribers or SubscriberStore(settings.subscribers_file),
                smtp_host=settings.email_host,
                smtp_port=settings.email_port,
                smtp_user=settings.email_user,
                smtp_password=settings.email_password,
                use_tls=settings.email_secure,
                from_email=settings.email_from,
            )
        )
    else:
        logger.warning("email_integration_disabled", reason="EMAIL_HOST not set")

    if settings.alert_webhook_url:
        integrations.append(
            WebhookIntegration(
                url=settings.alert_webhook_url,
                timeout=settings.alert_dispatch_timeout_seconds,
            )
        )

    return integrations
