import httpx
import structlog

from stockwatch.models import Settings, WatchedItem

logger = structlog.get_logger(__name__)

TWILIO_API = "https://api.twilio.com/2010-04-01"


class TwilioError(Exception):
    """Exception for Twilio API errors."""
    pass


def format_in_stock_message(item: WatchedItem) -> str:
    return f"{item.name} IN STOCK: {item.url}"


async def sms_send(body: str, settings: Settings, transport=None):
    """Send one SMS through the Twilio Messages API.

    Returns (ok, status, body) like the other notifiers. Raises TwilioError
    when Twilio rejects the message; network errors propagate as httpx errors.
    """
    creds = settings.twilio
    if not creds.is_complete or not settings.phone:
        logger.warning("SMS not configured")
        return False, 0, ""

    url = f"{TWILIO_API}/Accounts/{creds.sid}/Messages.json"
    async with httpx.AsyncClient(timeout=10, transport=transport) as client:
        r = await client.post(
            url,
            auth=(creds.sid, creds.token),
            data={"Body": body, "From": creds.number, "To": settings.phone},
        )
    logger.debug("Twilio response", status=r.status_code, body=r.text[:200])

    if r.status_code >= 400:
        raise TwilioError(f"HTTP {r.status_code}: {r.text}")
    return True, r.status_code, r.text


async def notify_in_stock(item: WatchedItem, settings: Settings) -> bool:
    """Send the in-stock alert for an item, logging instead of raising."""
    try:
        ok, status, _ = await sms_send(format_in_stock_message(item), settings)
    except Exception as e:
        logger.error("SMS failed", item=item.name, error=str(e))
        return False
    if ok:
        logger.info("SMS sent", item=item.name, status=status)
    return ok
