"""Unit tests for the email templates."""

import json

import pytest

from modules.notifications.models import NotificationType
from modules.notifications.templates import (
    render_email_html,
    render_email_text,
    tracking_url,
)

PIXEL = "http://svc.test/api/v1/notifications/track/t-1"


@pytest.mark.unit
class TestTemplates:
    def test_tracking_url(self):
        assert tracking_url("http://svc.test/", "t-1") == PIXEL

    @pytest.mark.parametrize("notification_type", list(NotificationType))
    def test_every_template_embeds_pixel(self, notification_type):
        html = render_email_html(notification_type, {"message": "hi"}, "Ada", PIXEL)

        assert f'src="{PIXEL}"' in html
        assert 'width="1" height="1"' in html

    def test_user_update_greets_by_name(self):
        html = render_email_html(NotificationType.USER_UPDATE, {}, "Ada", PIXEL)

        assert "Welcome to Our Backend System, Ada!" in html

    def test_recommendation_lists_items_with_prices(self):
        content = {
            "recommendations": [
                {"productId": "p-1", "name": "Lamp", "category": "home", "price": 1234.5}
            ]
        }

        html = render_email_html(NotificationType.RECOMMENDATION, content, "Ada", PIXEL)

        assert "Lamp" in html
        assert "$1,234.50" in html

    def test_content_is_escaped(self):
        html = render_email_html(
            NotificationType.PROMOTION, {"message": "<script>x</script>"}, "<b>", PIXEL
        )

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_text_part_is_json(self):
        assert json.loads(render_email_text({"a": 1})) == {"a": 1}
