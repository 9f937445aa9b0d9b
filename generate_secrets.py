#!/usr/bin/env python3
"""
Generate secure secrets for LinePicks
Run this script to generate the required SECRET_KEY and JWT_SECRET_KEY
"""

import secrets


def generate_secrets():
    """Generate secure random keys for the application"""
    print("🔐 Generating secure secrets for LinePicks...")
    print("=" * 50)

    secret_key = secrets.token_urlsafe(32)
    jwt_key = secrets.token_urlsafe(48)

    print(f"SECRET_KEY={secret_key}")
    print(f"JWT_SECRET_KEY={jwt_key}")

    print("=" * 50)
    print("📝 Copy these values to your .env file")
    print("⚠️  Keep these secrets secure and never commit them to version control!")
    print("⚠️  Changing JWT_SECRET_KEY signs everyone out.")


if __name__ == "__main__":
    generate_secrets()
