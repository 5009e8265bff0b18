"""Password encryption for account records.

Each account stores an encrypted password together with its own secured key.
A secured key is a random Fernet key which is itself encrypted with a key
derived (PBKDF2-HMAC-SHA256) from the master passphrase:

    secured_key = salt (16 bytes) || Fernet(kdf(passphrase, salt)).encrypt(account_key)

Repositories store both values as opaque blobs. A password can only be
decrypted with the secured key it was encrypted with and the passphrase that
protects that key; any mismatch raises :class:`CryptoError`.
"""

import base64
import os

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from config import get_settings
from vault.core.exceptions import CryptoError

SALT_SIZE = 16


def _derive_key(passphrase: str, salt: bytes, iterations: int | None = None) -> bytes:
    """Derive a urlsafe base64 Fernet key from a passphrase."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations or get_settings().crypt_kdf_iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(passphrase.encode("utf-8")))


def make_secured_key(passphrase: str) -> bytes:
    """Create a new random account key protected by the passphrase.

    Args:
        passphrase: Master passphrase

    Returns:
        Secured key blob (salt followed by the encrypted account key)
    """
    salt = os.urandom(SALT_SIZE)
    account_key = Fernet.generate_key()
    return salt + Fernet(_derive_key(passphrase, salt)).encrypt(account_key)


def unlock_secured_key(secured_key: bytes, passphrase: str) -> bytes:
    """Recover the account key from a secured key.

    Raises:
        CryptoError: If the blob is malformed or the passphrase is wrong
    """
    if len(secured_key) <= SALT_SIZE:
        raise CryptoError("Secured key is too short")

    salt, token = secured_key[:SALT_SIZE], secured_key[SALT_SIZE:]
    try:
        return Fernet(_derive_key(passphrase, salt)).decrypt(token)
    except InvalidToken as e:
        raise CryptoError("Unable to unlock secured key") from e


def encrypt(data: str, secured_key: bytes, passphrase: str) -> bytes:
    """Encrypt a clear text password with an account's secured key."""
    account_key = unlock_secured_key(secured_key, passphrase)
    return Fernet(account_key).encrypt(data.encode("utf-8"))


def decrypt(data: bytes, secured_key: bytes, passphrase: str) -> str:
    """Decrypt a password previously encrypted with :func:`encrypt`.

    Raises:
        CryptoError: If the key does not match the encrypted data
    """
    account_key = unlock_secured_key(secured_key, passphrase)
    try:
        return Fernet(account_key).decrypt(data).decode("utf-8")
    except InvalidToken as e:
        raise CryptoError("Unable to decrypt data with the given key") from e
