#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify MongoDB and the SMTP relay are reachable.
Usage: python scripts/test_connections.py
"""
import smtplib
import sys
sys.path.insert(0, '.')

from app.db.mongodb import test_mongo_connection, init_mongo_indexes
from app.core.config import get_settings
from app.services.mail_service import SmtpOtpMailer


def check_smtp_connection(settings) -> bool:
    """Connect and authenticate against the SMTP relay without sending mail."""
    try:
        with SmtpOtpMailer(settings).connect():
            pass
        return True
    except (smtplib.SMTPException, OSError) as e:
        print(f"    SMTP error: {e}")
        return False


def main():
    settings = get_settings()
    print("=" * 50)
    print("CAREERHUB - CONNECTION TEST")
    print("=" * 50)

    # Test MongoDB
    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
        init_mongo_indexes()
        print("    ✅ MongoDB: indexes ensured")
    else:
        print("    ❌ MongoDB: FAILED")

    # Test SMTP (only if configured)
    print("\n[2] Testing SMTP...")
    if settings.smtp_configured:
        print(f"    Host: {settings.smtp_host}:{settings.smtp_port}")
        if check_smtp_connection(settings):
            print("    ✅ SMTP: CONNECTED")
        else:
            print("    ❌ SMTP: FAILED")
    else:
        print("    ⚠️  SMTP: not configured, OTPs will be logged to the console")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
