"""Repository adapters package: explicit public exports.

Call `get_repositories(db_session)` to obtain repository instances.
"""

from weakref import WeakKeyDictionary

_repos_map: "WeakKeyDictionary" = WeakKeyDictionary()


def get_repositories(db_session):
    """Return a simple container of repository instances wired to the given db_session."""
    # Memoize per db_session so callers sharing a session get the same instances
    existing = _repos_map.get(db_session)
    if existing is not None:
        return existing

    # import concrete implementations lazily so callers obtain repositories
    # only via the factory API rather than top-level imports
    from .audit_repository import SqlAlchemyAuditRepository
    from .tokens_repository import (
        SqlAlchemyPasswordResetTokenRepository,
        SqlAlchemyVerificationTokenRepository,
    )
    from .users_repository import SqlAlchemyUserRepository

    result = {
        "users": SqlAlchemyUserRepository(db_session),
        "verification_tokens": SqlAlchemyVerificationTokenRepository(db_session),
        "password_reset_tokens": SqlAlchemyPasswordResetTokenRepository(db_session),
        "audit": SqlAlchemyAuditRepository(db_session),
    }
    _repos_map[db_session] = result
    return result


__all__ = ["get_repositories"]
