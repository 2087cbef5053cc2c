"""bcrypt password hashes.

Hashes written by pgcrypto's ``crypt(..., gen_salt('bf'))`` (the seeded
administrator) carry the ``$2a$`` prefix; bcrypt.checkpw accepts those too.
"""

import bcrypt

from config.settings import settings

# Compared against when the e-mail is unknown so login costs the same either way
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """True if ``plain`` matches ``hashed``; a missing hash never matches."""
    candidate = hashed.encode("utf-8") if hashed else _DUMMY_HASH
    matched = bcrypt.checkpw(plain.encode("utf-8"), candidate)
    return matched and hashed is not None
