"""
Key material provisioner — the RSA keypair the services sign with.

``keys/private.pem`` and ``keys/public.pem`` are created together or
not at all. When both exist they are kept as they are: rotating them
means deleting the directory and re-running install.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from suite_setup.core.errors import MissingPrerequisite
from suite_setup.core.observability.console import Console

logger = logging.getLogger(__name__)

PRIVATE_KEY_FILE = "private.pem"
PUBLIC_KEY_FILE = "public.pem"
PUBLIC_EXPONENT = 65537
MIN_KEY_SIZE = 2048
PRIVATE_KEY_MODE = 0o600


def key_paths(keys_dir: Path) -> tuple[Path, Path]:
    return keys_dir / PRIVATE_KEY_FILE, keys_dir / PUBLIC_KEY_FILE


def generate_keypair(key_size: int = MIN_KEY_SIZE) -> tuple[bytes, bytes]:
    """Return ``(private_pem, public_pem)`` for a fresh RSA key.

    PKCS#8 private / SubjectPublicKeyInfo public, the same PEM layout
    ``openssl genrsa`` and ``openssl rsa -pubout`` produce.
    """
    if key_size < MIN_KEY_SIZE:
        raise ValueError(f"RSA key size must be at least {MIN_KEY_SIZE} bits")

    private_key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


def _write_private(path: Path, data: bytes) -> None:
    """Write *data* to *path*, readable by the owner only."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, PRIVATE_KEY_MODE)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)
    # O_CREAT mode does not apply to a file that already existed
    os.chmod(path, PRIVATE_KEY_MODE)


def verify_keypair(private_path: Path, public_path: Path) -> None:
    """Check that both files parse and belong together.

    Raises:
        MissingPrerequisite: Either file is unreadable, malformed, or
            the public key is not derived from the private one.
    """
    hint = f"Delete {private_path.parent} and re-run install to generate a new keypair."
    try:
        private_key = serialization.load_pem_private_key(private_path.read_bytes(), password=None)
        public_key = serialization.load_pem_public_key(public_path.read_bytes())
    except (OSError, ValueError, TypeError) as e:
        raise MissingPrerequisite(f"Existing security keys are unreadable: {e}", hint=hint) from e

    if not isinstance(private_key, rsa.RSAPrivateKey) or not isinstance(public_key, rsa.RSAPublicKey):
        raise MissingPrerequisite("Existing security keys are not RSA keys.", hint=hint)

    if private_key.public_key().public_numbers() != public_key.public_numbers():
        raise MissingPrerequisite("Existing public key does not match the private key.", hint=hint)


def ensure_keypair(keys_dir: Path, console: Console, *, key_size: int = MIN_KEY_SIZE) -> bool:
    """Make sure a keypair exists under *keys_dir*.

    Returns:
        True if a new keypair was written, False if the existing one was kept.
    """
    console.step("Generating security keys...")

    if not keys_dir.is_dir():
        console.info(f"Creating {keys_dir.name} directory...")
        keys_dir.mkdir(parents=True, exist_ok=True)

    private_path, public_path = key_paths(keys_dir)

    if private_path.is_file() and public_path.is_file():
        verify_keypair(private_path, public_path)
        console.info("Security keys already exist.")
        return False

    if private_path.exists() or public_path.exists():
        logger.warning("Only one half of the keypair exists in %s — regenerating both", keys_dir)

    console.info("Generating RSA private and public keys...")
    private_pem, public_pem = generate_keypair(key_size)
    _write_private(private_path, private_pem)
    public_path.write_bytes(public_pem)
    console.success("Security keys generated successfully.")
    return True
