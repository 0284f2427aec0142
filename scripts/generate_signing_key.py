#!/usr/bin/env python3
"""
Generate a random HMAC key for signing session tokens
"""

import argparse
import secrets
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


def generate_signing_key(num_bytes: int = 48) -> str:
    """Generate a URL-safe random key"""
    return secrets.token_urlsafe(num_bytes)


def main():
    """Main function"""
    parser = argparse.ArgumentParser(description="Generate JWT_SECRET_KEY for session tokens")
    parser.add_argument("--bytes", type=int, default=48, help="Random bytes of key material (default: 48)")
    args = parser.parse_args()

    if args.bytes < 32:
        parser.error("--bytes must be at least 32")

    key = generate_signing_key(args.bytes)

    # Settings requires a key, so load it only once one exists
    os.environ["JWT_SECRET_KEY"] = key
    from ledger_auth.core.config import Settings

    # Fail here rather than at service start if the key would be rejected
    Settings(JWT_SECRET_KEY=key)

    print("=" * 60)
    print("Session Signing Key Generator")
    print("=" * 60)
    print()
    print("Add this line to .env:")
    print()
    print(f"JWT_SECRET_KEY={key}")
    print()
    print("Rotating the key invalidates every issued session token.")
    print()


if __name__ == "__main__":
    main()
