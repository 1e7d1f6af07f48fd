import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    BRAND: str = "Random Spot Certificate"

    # Stripe Checkout
    STRIPE_SECRET_KEY: str = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_PRICE_ID: str = os.getenv("STRIPE_PRICE_ID", "")
    STRIPE_API_VERSION: str = os.getenv("STRIPE_API_VERSION", "2024-06-20")
    SITE_URL: str = os.getenv("SITE_URL", "").rstrip("/")

    # Mail (Gmail SMTP with an app password by default)
    GMAIL_USER: str = os.getenv("GMAIL_USER", "")
    GMAIL_APP_PASSWORD: str = os.getenv("GMAIL_APP_PASSWORD", "")
    SMTP_HOST: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "465"))

    # Redis (saved spots)
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SPOT_TTL_SECONDS: int = int(os.getenv("SPOT_TTL_SECONDS", str(7 * 24 * 3600)))

    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "")
    RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", "true")

    # Land checks
    NOMINATIM_DOMAIN: str = os.getenv("NOMINATIM_DOMAIN", "nominatim.openstreetmap.org")
    NOMINATIM_USER_AGENT: str = os.getenv(
        "NOMINATIM_USER_AGENT", "random-spot-certificate/3.0 (+https://randomspotcertificate.com)"
    )
    NOMINATIM_MIN_DELAY_SECONDS: float = float(os.getenv("NOMINATIM_MIN_DELAY_SECONDS", "1.0"))
    OVERPASS_URL: str = os.getenv("OVERPASS_URL", "https://overpass-api.de/api/interpreter")
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "12"))

    ROAD_CHECK_ENABLED: bool = _env_bool("ROAD_CHECK_ENABLED", "true")
    ROAD_RADIUS_METERS: int = int(os.getenv("ROAD_RADIUS_METERS", "3000"))
    MIN_DISPLAY_NAME_LENGTH: int = int(os.getenv("MIN_DISPLAY_NAME_LENGTH", "12"))
    MAX_CONSECUTIVE_CHECK_ERRORS: int = int(os.getenv("MAX_CONSECUTIVE_CHECK_ERRORS", "3"))
    WATER_KEYWORDS: tuple[str, ...] = tuple(
        w.strip().lower()
        for w in os.getenv(
            "WATER_KEYWORDS",
            "ocean,sea,bay,strait,channel,water,river,lake,reservoir,reef,coastline,beach",
        ).split(",")
        if w.strip()
    )

    # Attempt budgets per mode
    STRICT_MAX_ATTEMPTS: int = int(os.getenv("STRICT_MAX_ATTEMPTS", "35"))
    LOOSE_MAX_ATTEMPTS: int = int(os.getenv("LOOSE_MAX_ATTEMPTS", "5"))

    PORT: int = int(os.getenv("PORT", "8000"))

settings = Settings()
