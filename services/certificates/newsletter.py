"""Footer mailing-list signup: notify the operator and confirm to the subscriber"""

import logging

from services.payments import looks_like_email

from .mailer import Mailer

logger = logging.getLogger(__name__)

DISPOSABLE_MAIL_HINTS = ("mailinator", "tempmail", "guerrillamail", "10minutemail", "yopmail")

SUBSCRIBED_MESSAGE = "Subscribed ✅ Check your inbox."

CONFIRMATION_HTML = """
<div style="font-family:system-ui,-apple-system,Segoe UI,Roboto,Arial;line-height:1.5">
  <h2 style="margin:0 0 8px">You’re in</h2>
  <p style="margin:0 0 12px;color:#444">
    You’ll get occasional updates from Random Spot Certificate.
    No spam, just drops / changes / new ideas.
  </p>
  <p style="margin:0 0 12px;color:#444">
    Unsubscribe: reply to this email with <b>UNSUBSCRIBE</b>.
  </p>
  <p style="margin:0;color:#666;font-size:12px">
    You’re receiving this because you entered your email on the site.
  </p>
</div>
"""


async def subscribe(email: str, mailer: Mailer) -> str:
    """
    Subscribe an address.

    Disposable inboxes get the same success message without any mail being
    sent, so bots learn nothing.

    Raises:
        ValueError: invalid address
        DeliveryError: mail could not be sent
    """
    if not looks_like_email(email):
        raise ValueError("Invalid email")

    lower = email.lower()
    if any(hint in lower for hint in DISPOSABLE_MAIL_HINTS):
        logger.info(f"Ignoring disposable address {email}")
        return SUBSCRIBED_MESSAGE

    await mailer.send(
        mailer.user,
        f"New subscriber: {email}",
        text=f"New mailing list subscriber:\n\n{email}\n\n(Collected via site footer)\n",
    )
    await mailer.send(email, "You’re subscribed ✅", html=CONFIRMATION_HTML)

    return SUBSCRIBED_MESSAGE
