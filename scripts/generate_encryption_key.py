"""
Utility script to generate the portal credential encryption key

Run this once and export the printed value as ENCRYPTION_KEY.
"""
import secrets

from practice.crypto import generate_key


def main():
    print("=" * 70)
    print("PORTAL CREDENTIAL KEYS")
    print("=" * 70)
    print()
    print(f"ENCRYPTION_KEY={generate_key()}")
    print(f"JWT_SECRET={secrets.token_urlsafe(48)}")
    print()
    print("WARNING: keep these out of version control.")
    print("=" * 70)


if __name__ == "__main__":
    main()
