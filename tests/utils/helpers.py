"""
Test helper functions for common testing operations

These helpers build keys and encrypted files the way the data-sharing
platform does, and inspect captured logs.
"""

import base64
import hashlib
import os
from typing import Optional

from cryptography.hazmat.primitives import hashes, padding, serialization
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes


def generate_private_key_pem(key_size: int = 2048) -> str:
    """Create an RSA private key in PKCS#1 PEM format (like the digi.me key files)"""
    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


def encrypt_for_platform(
    private_key_pem: str, payload: bytes, tamper_hash: bool = False
) -> bytes:
    """Encrypt a payload in the platform file format for the given key pair"""
    private_key = serialization.load_pem_private_key(private_key_pem.encode("utf-8"), password=None)
    public_key = private_key.public_key()

    dsk = os.urandom(32)
    div = os.urandom(16)

    digest = hashlib.sha512(payload).digest()
    if tamper_hash:
        digest = bytes([digest[0] ^ 0xFF]) + digest[1:]

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(digest + payload) + padder.finalize()
    encryptor = Cipher(algorithms.AES(dsk), modes.CBC(div)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    encrypted_dsk = public_key.encrypt(
        dsk,
        asym_padding.OAEP(
            mgf=asym_padding.MGF1(algorithm=hashes.SHA1()),
            algorithm=hashes.SHA1(),
            label=None,
        ),
    )
    return encrypted_dsk + div + ciphertext


def file_response_body(
    private_key_pem: str,
    payload: bytes,
    metadata: Optional[dict] = None,
    compression: str = "no-compression",
) -> dict:
    """JSON body the platform returns for a single file download"""
    return {
        "fileContent": base64.b64encode(encrypt_for_platform(private_key_pem, payload)).decode(),
        "fileMetadata": metadata or {},
        "compression": compression,
    }


def get_log_messages(caplog, level: Optional[str] = None) -> list[str]:
    """Get all log messages, optionally filtered by level"""
    if level:
        return [record.getMessage() for record in caplog.records if record.levelname == level.upper()]
    return [record.getMessage() for record in caplog.records]


def assert_no_sensitive_data_in_logs(caplog, sensitive_patterns: list[str]):
    """Assert that sensitive data patterns don't appear in logs"""
    all_logs = " ".join(get_log_messages(caplog))

    for pattern in sensitive_patterns:
        assert pattern not in all_logs, f"Sensitive pattern '{pattern}' found in logs"
