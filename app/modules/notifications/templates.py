"""HTML templates for notification emails.

Every template embeds a hidden 1x1 image pointing at the tracking endpoint
so email opens mark the notification read.
"""

import json
from datetime import datetime, timezone
from html import escape
from typing import Any

from modules.notifications.models import NotificationType

EMAIL_STYLES = """
<style>
  body { font-family: 'Arial', sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
  .header { background-color: #f4f4f4; padding: 20px; text-align: center; }
  .content { background-color: #ffffff; padding: 20px; border-radius: 5px; }
  .footer { margin-top: 20px; font-size: 12px; color: #777; text-align: center; }
  pre { background-color: #f4f4f4; padding: 15px; border-radius: 5px; white-space: pre-wrap; word-wrap: break-word; }
</style>
"""


def tracking_url(base_url: str, tracking_id: str) -> str:
    return f"{base_url.rstrip('/')}/api/v1/notifications/track/{tracking_id}"


def _pixel(url: str) -> str:
    return f'<img src="{escape(url)}" width="1" height="1" style="display:none;" alt="" />'


def _pretty(content: Any) -> str:
    return escape(json.dumps(content, indent=2, default=str))


def _footer() -> str:
    year = datetime.now(timezone.utc).year
    return f'<div class="footer">&copy; {year} Our Backend System. All rights reserved.</div>'


def _format_price(price: Any) -> str:
    try:
        return f"${float(price):,.2f}"
    except (TypeError, ValueError):
        return escape(str(price))


def _user_update(content: Any, name: str) -> str:
    return f"""
<div class="header"><h1>Welcome to Our Backend System, {escape(name)}!</h1></div>
<div class="content">
  <p>Great news! Your account has been successfully created and configured in our backend system.</p>
  <h3>What This Means for You:</h3>
  <ul>
    <li>You now have full access to our platform's features</li>
    <li>Your profile is set up and ready to go</li>
    <li>You'll receive important updates directly to this email</li>
  </ul>
  <p>We're excited to have you on board. If you have any questions, our support team is always here to help!</p>
</div>
"""


def _order_update(content: Any, name: str) -> str:
    return f"""
<div class="content">
  <h2>Order Status Update</h2>
  <p>Hi {escape(name)}, here is the latest on your order:</p>
  <pre>{_pretty(content)}</pre>
</div>
"""


def _promotion(content: Any, name: str) -> str:
    message = content.get("message") if isinstance(content, dict) else None
    return f"""
<div class="content">
  <h2>Special Promotion Alert</h2>
  <p>Hi {escape(name)},</p>
  <p>{escape(str(message or "Check out our latest promotions!"))}</p>
</div>
"""


def _recommendation(content: Any, name: str) -> str:
    items = content.get("recommendations", []) if isinstance(content, dict) else []
    rows = "".join(
        "<li><strong>{}</strong> ({}) - {}</li>".format(
            escape(str(item.get("name", ""))),
            escape(str(item.get("category", ""))),
            _format_price(item.get("price")),
        )
        for item in items
        if isinstance(item, dict)
    )
    return f"""
<div class="header"><h1>Picked for you, {escape(name)}</h1></div>
<div class="content">
  <p>Based on your recent activity we think you'll like these:</p>
  <ul>{rows}</ul>
</div>
"""


def _default(content: Any, name: str) -> str:
    return f"""
<div class="header"><h1>Notification for {escape(name)}</h1></div>
<div class="content">
  <p>You have a new notification:</p>
  <pre>{_pretty(content)}</pre>
</div>
"""


_RENDERERS = {
    NotificationType.USER_UPDATE: _user_update,
    NotificationType.ORDER_UPDATE: _order_update,
    NotificationType.PROMOTION: _promotion,
    NotificationType.RECOMMENDATION: _recommendation,
}


def render_email_html(
    notification_type: NotificationType, content: Any, name: str, pixel_url: str
) -> str:
    """Render the HTML body for a notification email.

    Args:
        notification_type: Selects the template
        content: Notification content
        name: Recipient display name
        pixel_url: Open tracking URL for the hidden image

    Returns:
        Complete HTML document
    """
    renderer = _RENDERERS.get(notification_type, _default)
    body = renderer(content, name)
    return (
        f"<html><head>{EMAIL_STYLES}</head><body><div>{body}"
        f"{_pixel(pixel_url)}{_footer()}</div></body></html>"
    )


def render_email_text(content: Any) -> str:
    """Plain text part: the content as JSON."""
    return json.dumps(content, default=str)
