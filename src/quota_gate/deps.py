"""Dependency injection singletons for quota-gate."""

from quota_gate.common.config import get_settings
from quota_gate.common.database import DatabaseManager
from quota_gate.access.gate import AccessGate
from quota_gate.content.repository import ContentRepository
from quota_gate.content.service import ContentService
from quota_gate.usage.store import UsageStore
from quota_gate.users.service import UserService

_db: DatabaseManager | None = None
_store: UsageStore | None = None
_gate: AccessGate | None = None
_repository: ContentRepository | None = None
_content: ContentService | None = None
_users: UserService | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_usage_store() -> UsageStore:
    global _store
    if _store is None:
        _store = UsageStore()
    return _store


def get_access_gate() -> AccessGate:
    global _gate
    if _gate is None:
        _gate = AccessGate(get_settings(), get_usage_store())
    return _gate


def get_content_repository() -> ContentRepository:
    global _repository
    if _repository is None:
        _repository = ContentRepository()
    return _repository


def get_content_service() -> ContentService:
    global _content
    if _content is None:
        _content = ContentService(
            get_settings(),
            get_access_gate(),
            get_content_repository(),
            get_usage_store(),
        )
    return _content


def get_user_service() -> UserService:
    global _users
    if _users is None:
        _users = UserService()
    return _users


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _store, _gate, _repository, _content, _users
    _db = None
    _store = None
    _gate = None
    _repository = None
    _content = None
    _users = None
