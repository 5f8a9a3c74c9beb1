"""Signing of logbook records.

Each build record carries a SHA-256 digest of its canonical JSON. When a
record is signed, the digest is signed with an RSA-PSS key kept next to the
logbook; :func:`verify_signature` checks a digest against the public half.
"""
from __future__ import annotations

import hashlib
from pathlib import Path

from ..constants import KEY_FILE, PUB_FILE

try:  # pragma: no cover - optional dependency
    from cryptography.exceptions import InvalidSignature
    from cryptography.hazmat.primitives import hashes, serialization
    from cryptography.hazmat.primitives.asymmetric import padding, rsa
except ImportError:  # pragma: no cover
    rsa = padding = hashes = serialization = InvalidSignature = None

KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537


def _require_cryptography():
    if serialization is None:
        raise RuntimeError(
            "Signing logbook records requires the 'cryptography' package"
        )


def _pss():
    return padding.PSS(
        mgf=padding.MGF1(hashes.SHA256()), salt_length=padding.PSS.MAX_LENGTH
    )


def digest(text):
    """Return the SHA-256 hex digest of *text*."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _private_pem(private_key):
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _public_pem(private_key):
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def ensure_keypair(key_file=KEY_FILE, pub_file=PUB_FILE):
    """Load the architect's signing key, generating a keypair on first use."""
    _require_cryptography()

    key_path, pub_path = Path(key_file), Path(pub_file)
    if key_path.exists():
        return serialization.load_pem_private_key(
            key_path.read_bytes(), password=None
        )

    print("🔐 Generating architect signing key ...")
    private_key = rsa.generate_private_key(
        public_exponent=PUBLIC_EXPONENT, key_size=KEY_SIZE
    )
    key_path.write_bytes(_private_pem(private_key))
    pub_path.write_bytes(_public_pem(private_key))
    print(f"  ✓ Signing key → {key_path}, public key → {pub_path}")
    return private_key


def sign_hash(sha256_hex, key_file=KEY_FILE, pub_file=PUB_FILE):
    """Return the hex signature of a record digest."""
    private_key = ensure_keypair(key_file, pub_file)
    return private_key.sign(sha256_hex.encode(), _pss(), hashes.SHA256()).hex()


def verify_signature(sha256_hex, signature_hex, pub_file=PUB_FILE):
    """Return True when *signature_hex* signs *sha256_hex* under *pub_file*."""
    _require_cryptography()

    public_key = serialization.load_pem_public_key(Path(pub_file).read_bytes())
    try:
        public_key.verify(
            bytes.fromhex(signature_hex), sha256_hex.encode(), _pss(), hashes.SHA256()
        )
    except InvalidSignature:
        return False
    return True


__all__ = [
    "digest",
    "ensure_keypair",
    "sign_hash",
    "verify_signature",
]
