"""
Email the PDF certificate for a paid checkout session.

Delivery is idempotent per session: once mail goes out, the payment intent
is marked with ``certificate_emailed=yes`` and later calls only report it.
"""

import logging
from datetime import UTC, datetime
from html import escape
from typing import Optional

from pydantic import BaseModel

from services.payments import CertificateMetadata, PaymentError, StripeGateway, looks_like_email

from .mailer import Attachment, DeliveryError, Mailer
from .pdf import render_certificate_pdf

logger = logging.getLogger(__name__)

EMAILED_MARKER = "certificate_emailed"
EMAILED_AT = "certificate_emailed_at"
EMAILED_TO = "certificate_email_to"

SUBJECT = "Your Random Spot Certificate (PDF)"
MARKER_NOT_SAVED = "Emailed, but delivery was not recorded."


class DeliveryResult(BaseModel):
    ok: bool
    delivered: bool
    to: Optional[str] = None
    message: Optional[str] = None


def certificate_email_html(meta: CertificateMetadata) -> str:
    def e(value: str, fallback: str = "?") -> str:
        return escape(value or fallback)

    return f"""
<div style="font-family:system-ui,-apple-system,Segoe UI,Roboto,Arial;line-height:1.5">
  <h2 style="margin:0 0 8px">Your certificate is attached</h2>
  <p style="margin:0 0 12px;color:#444">
    Attached is your PDF certificate. Below is the key info + legal notes.
  </p>

  <div style="padding:12px;border:1px solid #eee;border-radius:10px;margin:0 0 12px">
    <div><b>Country:</b> {e(meta.country)}</div>
    <div><b>Mode:</b> {e(meta.mode)}</div>
    <div><b>Center:</b> {e(meta.lat)}, {e(meta.lon)}</div>
    <div><b>Tile:</b> {e(meta.tile_m, "1")} m × {e(meta.tile_m, "1")} m</div>
    <div><b>Seed:</b> {e(meta.seed)}</div>
  </div>

  <h3 style="margin:18px 0 6px">Legal info (quick)</h3>
  <ul style="margin:0 0 12px;color:#444">
    <li>This is a novelty certificate referencing a randomly generated geographic area tile.</li>
    <li>No ownership, property rights, access rights, or permissions are granted.</li>
    <li>The location may be private, restricted, closed, unsafe, or inaccessible.</li>
    <li>If you visit, follow local rules and obtain permission where required.</li>
  </ul>

  <p style="margin:0;color:#444">Full terms are on the site’s Terms page.</p>
</div>
"""


async def deliver_certificate(session_id: str, gateway: StripeGateway, mailer: Mailer) -> DeliveryResult:
    """
    Email the certificate for a paid, opted-in session at most once.

    The marker is written after the mail goes out and is best effort: if
    saving it fails the mail still counts as delivered, but a later call
    may send it again.

    Raises:
        DeliveryError: the session has no payment intent, or sending failed
        PaymentError: the session could not be read
    """
    session = await gateway.retrieve_session(session_id, expand_payment_intent=True)

    if not session.paid:
        return DeliveryResult(ok=False, delivered=False, message="Payment not confirmed.")

    meta = session.metadata
    if not meta.consented:
        return DeliveryResult(ok=True, delivered=False, message="Email delivery not opted in.")

    to = meta.email
    if not looks_like_email(to):
        return DeliveryResult(ok=False, delivered=False, message="Missing/invalid email in metadata.")

    if not session.payment_intent_id:
        raise DeliveryError("Missing payment_intent.")

    pi_meta = session.payment_intent_metadata
    if pi_meta.get(EMAILED_MARKER, "").lower() == "yes":
        return DeliveryResult(ok=True, delivered=True, to=to, message="Already emailed (idempotent).")

    pdf_bytes = render_certificate_pdf(meta)
    await mailer.send(
        to,
        SUBJECT,
        html=certificate_email_html(meta),
        text=f"Your certificate for {meta.lat}, {meta.lon} is attached.",
        attachments=[Attachment(filename=meta.filename, content=pdf_bytes)],
    )

    logger.info(f"Certificate for session {session_id} emailed to {to}")

    try:
        await gateway.update_payment_intent_metadata(
            session.payment_intent_id,
            {
                **pi_meta,
                EMAILED_MARKER: "yes",
                EMAILED_AT: datetime.now(UTC).isoformat(),
                EMAILED_TO: to,
            },
        )
    except PaymentError:
        logger.exception(
            f"Certificate for session {session_id} was emailed but the delivery marker "
            f"on {session.payment_intent_id} was not saved"
        )
        return DeliveryResult(ok=True, delivered=True, to=to, message=MARKER_NOT_SAVED)

    return DeliveryResult(ok=True, delivered=True, to=to)
