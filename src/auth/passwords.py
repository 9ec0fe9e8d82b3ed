"""Password hashing and verification, including legacy formats upgraded on login.

Three stored formats are recognised:

- bcrypt (``$2b$...``): the current format, written for every new password.
- scrypt ``<hex digest>.<hex salt>``: written by the previous Node deployment
  (``crypto.scrypt(password, salt, 64)`` with its default cost parameters).
- plain text: rows created before hashing was introduced.

Anything that is not bcrypt is rehashed after the next successful login.
"""

import hashlib
import hmac
import re

import bcrypt as _bcrypt

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")

# bcrypt only reads the first 72 bytes; newer releases raise instead of truncating
BCRYPT_MAX_BYTES = 72

_LEGACY_SCRYPT_RE = re.compile(r"^[0-9a-f]{128}\.[0-9a-f]+$")
LEGACY_SCRYPT_PARAMS = {"n": 16384, "r": 8, "p": 1, "dklen": 64}


def hash_password(password: str) -> str:
    return _bcrypt.hashpw(password.encode()[:BCRYPT_MAX_BYTES], _bcrypt.gensalt()).decode()


def is_legacy_scrypt(stored: str) -> bool:
    return bool(_LEGACY_SCRYPT_RE.match(stored))


def needs_rehash(stored: str) -> bool:
    return not stored.startswith(BCRYPT_PREFIXES)


def _verify_legacy_scrypt(password: str, stored: str) -> bool:
    digest_hex, salt = stored.split(".", 1)
    # The Node code passed the hex salt string itself, not its decoded bytes
    supplied = hashlib.scrypt(password.encode(), salt=salt.encode(), **LEGACY_SCRYPT_PARAMS)
    return hmac.compare_digest(supplied.hex(), digest_hex)


def verify_password(password: str, stored: str) -> bool:
    if not stored:
        return False
    if stored.startswith(BCRYPT_PREFIXES):
        try:
            return _bcrypt.checkpw(password.encode()[:BCRYPT_MAX_BYTES], stored.encode())
        except ValueError:
            return False
    if is_legacy_scrypt(stored):
        return _verify_legacy_scrypt(password, stored)
    return hmac.compare_digest(password.encode(), stored.encode())
