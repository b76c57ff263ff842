"""Note content encryption.

Password-based AES-256-CBC in the OpenSSL "salted" envelope, the same format
CryptoJS ``AES.encrypt(text, passphrase)`` produces:

    base64("Salted__" + salt[8] + AES-256-CBC(PKCS#7(plaintext)))

Key and IV are derived from the passphrase and salt with EVP_BytesToKey
(MD5, one round). Content written by older deployments stays readable.
"""

import base64
import binascii
import os

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

# base64 of b"Salted" - every envelope starts with it
CIPHERTEXT_PREFIX = "U2FsdGVk"

_MAGIC = b"Salted__"
_SALT_SIZE = 8
_KEY_SIZE = 32
_IV_SIZE = 16
_BLOCK_SIZE = 16


class CipherError(Exception):
    """Raised when content can't be encrypted or decrypted."""


def looks_encrypted(text: str | None) -> bool:
    """Check if text is shaped like ciphertext.

    Only a prefix check: plaintext that happens to start with the envelope
    marker is reported as encrypted too.
    """
    if not text:
        return False
    return text.startswith(CIPHERTEXT_PREFIX)


def _derive_key_and_iv(passphrase: bytes, salt: bytes) -> tuple[bytes, bytes]:
    """OpenSSL EVP_BytesToKey with MD5 and a single iteration."""
    derived = b""
    block = b""
    while len(derived) < _KEY_SIZE + _IV_SIZE:
        digest = hashes.Hash(hashes.MD5())
        digest.update(block + passphrase + salt)
        block = digest.finalize()
        derived += block
    return derived[:_KEY_SIZE], derived[_KEY_SIZE:_KEY_SIZE + _IV_SIZE]


def encrypt(plaintext: str, key: str) -> str:
    """Encrypt text with the passphrase. Empty input is returned as is."""
    if not plaintext:
        return plaintext
    if not key:
        raise CipherError("Encryption key is not configured")

    salt = os.urandom(_SALT_SIZE)
    aes_key, iv = _derive_key_and_iv(key.encode("utf-8"), salt)

    padder = padding.PKCS7(_BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(aes_key), modes.CBC(iv)).encryptor()
    body = encryptor.update(padded) + encryptor.finalize()

    return base64.b64encode(_MAGIC + salt + body).decode("ascii")


def decrypt(ciphertext: str, key: str) -> str:
    """Decrypt an envelope produced by ``encrypt``.

    Text that doesn't look encrypted comes back unchanged. A wrong key or
    corrupted data raises CipherError; very rarely a wrong key yields garbage
    instead, so callers must not trust the output blindly either.
    """
    if not looks_encrypted(ciphertext):
        return ciphertext
    if not key:
        raise CipherError("Encryption key is not configured")

    try:
        raw = base64.b64decode(ciphertext.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CipherError("Ciphertext is not valid base64") from exc

    body = raw[len(_MAGIC) + _SALT_SIZE:]
    if not raw.startswith(_MAGIC) or not body or len(body) % _BLOCK_SIZE:
        raise CipherError("Ciphertext envelope is malformed")

    salt = raw[len(_MAGIC):len(_MAGIC) + _SALT_SIZE]
    aes_key, iv = _derive_key_and_iv(key.encode("utf-8"), salt)

    decryptor = Cipher(algorithms.AES(aes_key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(body) + decryptor.finalize()

    try:
        unpadder = padding.PKCS7(_BLOCK_SIZE * 8).unpadder()
        data = unpadder.update(padded) + unpadder.finalize()
        text = data.decode("utf-8")
    except (ValueError, UnicodeDecodeError) as exc:
        raise CipherError("Wrong key or corrupted data") from exc

    # encrypt() never produces an envelope for empty text
    if not text:
        raise CipherError("Decryption produced empty output")

    return text
