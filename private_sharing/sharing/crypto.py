"""
Decryption of files delivered by the data-sharing platform.

Each file is encrypted with a per-file data symmetric key (DSK):

    RSA-OAEP(DSK) [256 bytes] | DIV [16 bytes] | AES-256-CBC(SHA-512(data) | data)

The DSK is recovered with the application's private key, the remainder is
decrypted with AES-256-CBC and the embedded SHA-512 digest must match.
"""

import hmac
import logging
from functools import lru_cache

from cryptography.hazmat.primitives import hashes, padding, serialization
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from private_sharing.sharing.exceptions import FileDecryptionError

logger = logging.getLogger(__name__)

ENCRYPTED_DSK_LENGTH = 256
DIV_LENGTH = 16
HASH_LENGTH = 64
# Encrypted DSK + DIV + at least one block holding the digest and padding
MIN_FILE_LENGTH = 352


@lru_cache(maxsize=8)
def load_private_key(private_key_pem: str) -> RSAPrivateKey:
    """Parse a PEM private key (PKCS#1 or PKCS#8).

    Raises:
        FileDecryptionError: If the key cannot be parsed or is not RSA.
    """
    try:
        key = serialization.load_pem_private_key(private_key_pem.encode("utf-8"), password=None)
    except (ValueError, TypeError) as e:
        raise FileDecryptionError(f"Invalid private key: {e}") from e
    if not isinstance(key, RSAPrivateKey):
        raise FileDecryptionError("Private key must be an RSA key")
    return key


def decrypt_file(private_key_pem: str, data: bytes) -> bytes:
    """Decrypt one platform file.

    Args:
        private_key_pem: Application private key in PEM format.
        data: Raw encrypted file content.

    Returns:
        The decrypted payload.

    Raises:
        FileDecryptionError: If the file is malformed, cannot be decrypted
            with this key, or fails the integrity check.
    """
    size = len(data)
    if size < MIN_FILE_LENGTH or size % 16 != 0:
        raise FileDecryptionError("File size not valid")

    key = load_private_key(private_key_pem)

    try:
        dsk = key.decrypt(
            data[:ENCRYPTED_DSK_LENGTH],
            asym_padding.OAEP(
                mgf=asym_padding.MGF1(algorithm=hashes.SHA1()),
                algorithm=hashes.SHA1(),
                label=None,
            ),
        )
    except ValueError as e:
        raise FileDecryptionError("Could not recover data key") from e

    div = data[ENCRYPTED_DSK_LENGTH:ENCRYPTED_DSK_LENGTH + DIV_LENGTH]

    try:
        decryptor = Cipher(algorithms.AES(dsk), modes.CBC(div)).decryptor()
        padded = decryptor.update(data[ENCRYPTED_DSK_LENGTH + DIV_LENGTH:]) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        hash_and_data = unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise FileDecryptionError("Could not decrypt file content") from e

    expected = hash_and_data[:HASH_LENGTH]
    payload = hash_and_data[HASH_LENGTH:]

    digest = hashes.Hash(hashes.SHA512())
    digest.update(payload)
    if not hmac.compare_digest(digest.finalize(), expected):
        raise FileDecryptionError("Hash is not valid")

    logger.debug("Decrypted file payload of %d bytes", len(payload))
    return payload
