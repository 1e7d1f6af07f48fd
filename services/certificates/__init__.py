"""Certificate rendering and email delivery"""

from .delivery import DeliveryResult, deliver_certificate
from .mailer import Attachment, DeliveryError, Mailer, get_mailer
from .newsletter import subscribe
from .pdf import render_certificate_pdf

__all__ = [
    "DeliveryResult",
    "deliver_certificate",
    "Attachment",
    "DeliveryError",
    "Mailer",
    "get_mailer",
    "subscribe",
    "render_certificate_pdf",
]
