"""Hashing and verification of passwords and security answers."""

import logging

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
"""Default bcrypt cost factor."""

MAX_SECRET_BYTES = 72
"""Bcrypt only looks at the first 72 bytes of its input."""


def normalize_answer(answer: str) -> str:
    """
    Normalize a security answer before it is hashed or checked.

    The same normalization must be used when the answer is stored and when
    it is verified, so that ``" Caracas "`` and ``"CARACAS"`` match.
    """
    return answer.lower().strip()


def _encode(secret: str) -> bytes:
    encoded = secret.encode('utf-8')
    if len(encoded) > MAX_SECRET_BYTES:
        logger.debug('Secret exceeds %i bytes, truncating', MAX_SECRET_BYTES)
        encoded = encoded[:MAX_SECRET_BYTES]
    return encoded


class PasswordHasher(object):
    """Salted, deliberately slow one-way hashing with bcrypt."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        """
        Set the bcrypt cost factor.

        Parameters
        ----------
        rounds : int
            Log2 of the number of bcrypt iterations. Must be between 4 and 31.

        """
        self.rounds = rounds

    def hash(self, secret: str) -> str:
        """Generate a hash of ``secret`` with a fresh salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(secret), salt).decode('ascii')

    def check(self, secret: str, hashed: str) -> bool:
        """
        Check ``secret`` against a stored hash.

        An empty or malformed hash never matches.
        """
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(_encode(secret), hashed.encode('ascii'))
        except (ValueError, UnicodeEncodeError) as e:
            logger.error('Stored hash could not be checked: %s', e)
            return False
