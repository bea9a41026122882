"""Admin alert and customer email for a new booking.

Both go out as JSON POSTs to webhook relays. Delivery is best effort: a
failed call is logged and reported as ``False``, never raised to the caller.
"""
import requests
from loguru import logger
from markupsafe import escape

from errors import NotificationError
from schemas import booking_record_schema

CINEMA_NAME = "Sheshnag Cinema"
DEFAULT_TIMEOUT = 5.0

TIER_LABELS = {
    "gold": "Gold (Balcony)",
    "silver": "Silver (Standard)",
}
TIER_COLORS = {
    "gold": "#FFD700",
    "silver": "#C0C0C0",
}


def tier_label(tier_id):
    return TIER_LABELS.get(tier_id, TIER_LABELS["silver"])


class NotificationDispatcher:
    def __init__(self, admin_webhook_url, email_webhook_url, admin_contact, timeout=DEFAULT_TIMEOUT, session=None):
        self.admin_webhook_url = admin_webhook_url
        self.email_webhook_url = email_webhook_url
        self.admin_contact = admin_contact
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_admin_message(self, booking):
        return f"""🎬 *NEW BOOKING ALERT!*

*Movie:* {booking["movie_title"]}
*Customer:* {booking["customer_name"]}
*Phone:* {booking["customer_phone"]}
*Email:* {booking["customer_email"]}

*Booking Details:*
• Tickets: {booking["number_of_tickets"]} {tier_label(booking["ticket_tier"])}
• Showtime: {booking["showtime"]}
• Total Amount: ₹{booking["total_amount"]}
• Booking ID: {booking["id"]}

*Status:* Pending Payment

Please contact customer for payment confirmation! 🎫"""

    def build_email(self, booking):
        tier = tier_label(booking["ticket_tier"])
        tier_color = TIER_COLORS.get(booking["ticket_tier"], TIER_COLORS["silver"])
        seats_line = ""
        if booking.get("seats"):
            seats_line = f"<p><strong>Seats:</strong> {escape(', '.join(booking['seats']))}</p>"

        html = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Booking Confirmation - {CINEMA_NAME}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1>🎬 {CINEMA_NAME}</h1>
    <h2>Booking Confirmation</h2>
    <p>Dear {escape(booking["customer_name"])},</p>
    <p>Your booking has been successfully created! Please find the details below:</p>

    <div>
      <h3>📋 Booking Details</h3>
      <p><strong>Booking ID:</strong> {escape(booking["id"])}</p>
      <p><strong>Movie:</strong> {escape(booking["movie_title"])}</p>
      <p><strong>Showtime:</strong> {escape(booking["showtime"])}</p>
      <p><strong>Ticket Type:</strong> <span style="background-color: {tier_color}; padding: 8px 16px; border-radius: 20px;">{tier}</span></p>
      <p><strong>Number of Tickets:</strong> {booking["number_of_tickets"]}</p>
      {seats_line}
      <p><strong>Total Amount:</strong> ₹{booking["total_amount"]}</p>
    </div>

    <div style="background: #fff3cd; border: 1px solid #ffeaa7; padding: 15px;">
      <h3>💳 Payment Required</h3>
      <p><strong>Important:</strong> Please show this email at the cinema counter and pay ₹{booking["total_amount"]} to confirm your booking and collect your tickets.</p>
    </div>

    <p>Thank you for choosing {CINEMA_NAME}! 🙏</p>
    <p style="color: #666; font-size: 14px;">This is an automated email. Please do not reply to this message.</p>
  </div>
</body>
</html>"""

        return {
            "to": booking["customer_email"],
            "subject": f"Booking Confirmation - {booking['movie_title']} | {CINEMA_NAME}",
            "html": html,
            "bookingData": booking_record_schema.dump(booking),
        }

    def _post(self, channel, url, payload):
        if not url:
            raise NotificationError(channel, "webhook URL is not configured")
        try:
            res = self.session.post(url, json=payload, timeout=self.timeout)
            res.raise_for_status()
        except requests.RequestException as exc:
            raise NotificationError(channel, exc) from exc

    def send_admin_alert(self, booking) -> bool:
        payload = {
            "to": self.admin_contact,
            "message": self.build_admin_message(booking),
            "bookingData": booking_record_schema.dump(booking),
        }
        try:
            self._post("admin_alert", self.admin_webhook_url, payload)
        except NotificationError as exc:
            logger.warning(f"Booking {booking['id']}: {exc}")
            return False
        logger.info(f"Booking {booking['id']}: admin alert sent to {self.admin_contact}")
        return True

    def send_email_confirmation(self, booking) -> bool:
        try:
            self._post("email", self.email_webhook_url, self.build_email(booking))
        except NotificationError as exc:
            logger.warning(f"Booking {booking['id']}: {exc}")
            return False
        logger.info(f"Booking {booking['id']}: confirmation email sent to {booking['customer_email']}")
        return True

    def dispatch(self, booking):
        return {
            "admin_alert": self.send_admin_alert(booking),
            "email": self.send_email_confirmation(booking),
        }
