from functools import cache

import bcrypt
import structlog

logger = structlog.get_logger(__name__)

# Work factor of the hashes written by the record-management side
DEFAULT_HASH_ROUNDS = 10


def hash_password(password: str, rounds: int = DEFAULT_HASH_ROUNDS) -> str:
    """Hash a plaintext password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def hash_rounds(password_hash: str) -> int:
    """Work factor encoded in a bcrypt hash, e.g. 10 for ``$2b$10$...``."""
    return int(password_hash.split("$")[2])


def verify_password(password: str, password_hash: str) -> bool:
    """Verify password against stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash, or a password over the 72-byte bcrypt limit
        logger.warning("password_check_rejected")
        return False


@cache
def dummy_hash(rounds: int) -> str:
    """Hash compared against when no account matches, one per work factor."""
    return hash_password("classroll-no-such-account", rounds)


def burn_password_check(password: str, rounds: int = DEFAULT_HASH_ROUNDS) -> None:
    """Spend the same work as a real verification without an account to check against.

    ``rounds`` must match the cost of the stored hashes, otherwise the missing
    account path is measurably faster or slower than a wrong password.
    """
    verify_password(password, dummy_hash(rounds))
