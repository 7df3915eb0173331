"""Password hashing helpers."""

from functools import lru_cache
from types import SimpleNamespace
from typing import Sequence

import bcrypt as _bcrypt  # isort: skip

# passlib reads bcrypt.__about__.__version__ when its bcrypt handler loads;
# bcrypt 4.x dropped that attribute, so provide it before passlib is imported
if not hasattr(_bcrypt, "__about__"):
    _bcrypt.__about__ = SimpleNamespace(__version__=_bcrypt.__version__)  # type: ignore[attr-defined]

from passlib.context import CryptContext  # isort: skip

DEFAULT_SCHEMES = ("pbkdf2_sha256", "bcrypt")


@lru_cache(maxsize=8)
def _context(schemes: tuple[str, ...]) -> CryptContext:
    return CryptContext(schemes=list(schemes), deprecated="auto")


def hash_password(password: str, schemes: Sequence[str] = DEFAULT_SCHEMES) -> str:
    """Hash with the first configured scheme."""
    return _context(tuple(schemes)).hash(password)


def verify_password(password: str, hashed: str, schemes: Sequence[str] = DEFAULT_SCHEMES) -> bool:
    return _context(tuple(schemes)).verify(password, hashed)
