"""Pydantic models for checkout sessions and the certificate metadata they carry"""

import re
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_TILE_METERS = 1000

# Max stored length per metadata field
FIELD_LIMITS = {
    "country": 80,
    "mode": 40,
    "seed": 120,
    "lat": 40,
    "lon": 40,
    "tile_m": 12,
    "email": 120,
    "email_consent": 10,
}


def as_str(value: Any, max_len: int = 200) -> str:
    """Trimmed, length-capped string; anything that is not a string becomes ''"""
    if not isinstance(value, str):
        return ""
    value = value.strip()
    return value[:max_len]


def looks_like_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def certificate_filename(country: str, seed: str, extension: str = "pdf") -> str:
    """Download filename; ASCII only since it ends up in a Content-Disposition header"""
    country_part = UNSAFE_FILENAME_CHARS.sub("_", country or "XX").strip("_.") or "XX"
    seed_part = UNSAFE_FILENAME_CHARS.sub("_", (seed or "seed")[:10]).strip("_.") or "seed"
    return f"certificate-{country_part}-{seed_part}.{extension}"


class CertificateMetadata(BaseModel):
    """
    Fixed schema of the string metadata attached to a checkout session.

    Stripe stores it verbatim and hands it back on retrieval, so every field
    is a plain string with a default.
    """

    country: str = ""
    mode: str = ""
    seed: str = ""
    lat: str = ""
    lon: str = ""
    tile_m: str = "1"
    email: str = ""
    email_consent: Literal["yes", "no"] = "no"

    @field_validator("country", "mode", "seed", "lat", "lon", "tile_m", "email", mode="before")
    @classmethod
    def clip(cls, v: Any, info) -> str:
        return as_str(v, FIELD_LIMITS[info.field_name])

    @field_validator("tile_m", mode="after")
    @classmethod
    def default_tile(cls, v: str) -> str:
        return v or "1"

    @field_validator("email_consent", mode="before")
    @classmethod
    def normalize_consent(cls, v: Any) -> str:
        return "yes" if as_str(v, FIELD_LIMITS["email_consent"]).lower() == "yes" else "no"

    @classmethod
    def from_metadata(cls, metadata: Optional[dict]) -> "CertificateMetadata":
        """Read back from a provider's metadata map, ignoring unknown keys"""
        metadata = dict(metadata or {})
        return cls(**{key: metadata[key] for key in cls.model_fields if key in metadata})

    def to_metadata(self) -> dict[str, str]:
        return self.model_dump()

    @property
    def consented(self) -> bool:
        return self.email_consent == "yes"

    @property
    def tile_meters(self) -> float:
        try:
            value = float(self.tile_m)
        except ValueError:
            return 1.0
        return value if value > 0 else 1.0

    @property
    def filename(self) -> str:
        return certificate_filename(self.country, self.seed)


class CheckoutCreateRequest(BaseModel):
    """Body of the checkout create call (values arrive as strings, like the metadata)"""

    country: Any = None
    mode: Any = None
    seed: Any = None
    lat: Any = None
    lon: Any = None
    tile_m: Any = None
    email: Any = None
    email_consent: Any = None

    def to_metadata(self) -> CertificateMetadata:
        """
        Validate and normalise into the metadata schema.

        Raises:
            ValueError: with the message to send back to the client
        """
        lat_raw = as_str(self.lat, FIELD_LIMITS["lat"])
        lon_raw = as_str(self.lon, FIELD_LIMITS["lon"])
        tile_raw = as_str(self.tile_m, FIELD_LIMITS["tile_m"]) or "1"
        email = as_str(self.email, FIELD_LIMITS["email"])
        consent = "yes" if as_str(self.email_consent, 10).lower() == "yes" else "no"

        try:
            lat = float(lat_raw)
            lon = float(lon_raw)
        except ValueError:
            raise ValueError("Invalid coordinates")
        if not (abs(lat) <= 90 and abs(lon) <= 180):
            raise ValueError("Invalid coordinates")

        try:
            tile = float(tile_raw)
        except ValueError:
            raise ValueError("Invalid tile_m")
        if not (0 < tile <= MAX_TILE_METERS):
            raise ValueError("Invalid tile_m")

        if consent == "yes" and not looks_like_email(email):
            raise ValueError("Email consent is yes but email is missing/invalid")

        return CertificateMetadata(
            country=as_str(self.country, FIELD_LIMITS["country"]) or "NZ",
            mode=as_str(self.mode, FIELD_LIMITS["mode"]) or "publicish",
            seed=as_str(self.seed, FIELD_LIMITS["seed"]),
            lat=f"{lat:.6f}",
            lon=f"{lon:.6f}",
            tile_m=f"{tile:g}",
            email=email if consent == "yes" else "",
            email_consent=consent,
        )


class CheckoutSession(BaseModel):
    """The parts of a provider checkout session the app cares about"""

    id: str
    url: Optional[str] = None
    payment_status: str = "unpaid"
    created: Optional[int] = None
    amount_total: Optional[int] = None
    currency: Optional[str] = None
    metadata: CertificateMetadata = Field(default_factory=CertificateMetadata)
    raw_metadata: dict[str, str] = Field(default_factory=dict)
    payment_intent_id: Optional[str] = None
    payment_intent_metadata: dict[str, str] = Field(default_factory=dict)

    @property
    def paid(self) -> bool:
        return self.payment_status == "paid"


class VerifyResponse(BaseModel):
    paid: bool
    status: str
    created: Optional[int] = None
    amount_total: Optional[int] = None
    currency: Optional[str] = None
    metadata: Optional[dict[str, str]] = None
