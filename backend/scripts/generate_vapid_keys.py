#!/usr/bin/env python3
"""Generate a VAPID key pair for Web Push and print the .env lines."""

import argparse
import base64
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("utf-8").rstrip("=")


def generate(out_dir: Path | None = None) -> tuple[str, str]:
    """Return (private_key, public_key) as base64url strings."""
    vapid = Vapid()
    vapid.generate_keys()

    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)
        vapid.save_key(str(out_dir / "vapid_private.pem"))
        vapid.save_public_key(str(out_dir / "vapid_public.pem"))

    # Raw 32-byte scalar, which pywebpush accepts as vapid_private_key
    private_value = vapid.private_key.private_numbers().private_value
    private_key = _b64url(private_value.to_bytes(32, "big"))
    # Browsers expect the uncompressed point
    public_key = _b64url(
        vapid.public_key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.UncompressedPoint,
        )
    )
    return private_key, public_key


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--out-dir", type=Path, help="also save the keys as PEM files here")
    parser.add_argument("--subject", default="mailto:admin@arl.com")
    args = parser.parse_args()

    private_key, public_key = generate(args.out_dir)

    print("=" * 70)
    print("VAPID KEYS GENERATED - add to backend/.env")
    print("=" * 70)
    print(f"VAPID_PRIVATE_KEY={private_key}")
    print(f"VAPID_PUBLIC_KEY={public_key}")
    print(f"VAPID_SUBJECT={args.subject}")
    print("=" * 70)
    if args.out_dir is not None:
        print(f"\nKeys also saved to {args.out_dir}/vapid_private.pem and vapid_public.pem")


if __name__ == "__main__":
    main()
