"""
Startup script for deployment
Handles:
- Checking that payment and mail settings are present
- Uvicorn server launch
"""

import os
import sys

REQUIRED_SETTINGS = {
    "STRIPE_SECRET_KEY": "checkout will not work",
    "STRIPE_PRICE_ID": "checkout sessions cannot be created",
    "SITE_URL": "checkout redirects cannot be built",
    "GMAIL_USER": "certificate emails will not be sent",
    "GMAIL_APP_PASSWORD": "certificate emails will not be sent",
}


def check_settings() -> list[str]:
    """Print a line per missing setting and return the missing names"""
    missing = []
    for name, consequence in REQUIRED_SETTINGS.items():
        if os.getenv(name):
            print(f"✓ {name} set")
        else:
            print(f"⚠️  WARNING: {name} not set - {consequence}")
            missing.append(name)
    return missing


def main():
    """Main startup sequence"""
    print("=" * 60)
    print("🚀 Random Spot Certificate API - Startup")
    print("=" * 60)

    # Step 1: Settings
    print("\n[1/2] Checking settings...")
    check_settings()

    # Step 2: Launch uvicorn
    print("\n[2/2] Starting uvicorn server...")
    print("=" * 60)

    port = int(os.getenv("PORT", "8000"))

    # Import and run uvicorn
    import uvicorn

    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=port,
            log_level="info",
            access_log=True
        )
    except KeyboardInterrupt:
        print("\n⏹️  Shutting down...")
        sys.exit(0)


if __name__ == "__main__":
    main()
