"""
Credential storage for auth tokens and cached session objects.

Plays the part browser localStorage plays for the web front end. Supports
in-memory (tests), JSON file (CLI default) and Redis (shared hosts) backends.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Dict, Any

from .config import settings

logger = logging.getLogger(__name__)


# Storage keys shared with the web front end
AUTH_TOKEN_KEY = "authToken"
AUTH_USER_KEY = "authUser"
TENANT_KEY = "tenant"
WHATSAPP_TOKEN_KEY = "whatsappToken"
WHATSAPP_EMAIL_KEY = "whatsappEmail"
SUPER_ADMIN_TOKEN_KEY = "superAdminToken"
SUPER_ADMIN_USER_KEY = "superAdminUser"
IMPERSONATION_KEY = "impersonation"

# Cleared together on logout and on any 401 from the backend
SESSION_KEYS = (AUTH_TOKEN_KEY, AUTH_USER_KEY, TENANT_KEY)


class CredentialBackend(ABC):
    """Abstract backend for credential storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get value by key."""
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        """Set value."""
        pass

    @abstractmethod
    def delete(self, key: str):
        """Delete key."""
        pass

    def exists(self, key: str) -> bool:
        return self.get(key) is not None


class InMemoryBackend(CredentialBackend):
    """In-memory credential storage, lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._storage: Dict[str, str] = dict(initial or {})
        logger.debug("Initialized in-memory credential backend")

    def get(self, key: str) -> Optional[str]:
        return self._storage.get(key)

    def set(self, key: str, value: str):
        self._storage[key] = value

    def delete(self, key: str):
        self._storage.pop(key, None)

    def keys(self):
        return list(self._storage.keys())


class FileBackend(CredentialBackend):
    """
    JSON file credential storage.

    The whole file is rewritten on every change. The file is created with
    owner-only permissions since it holds bearer tokens.
    """

    def __init__(self, path: str):
        self.path = Path(path).expanduser()
        logger.debug(f"Initialized file credential backend: {self.path}")

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Credential file {self.path} is unreadable, ignoring it: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.chmod(tmp_path, 0o600)
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str):
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str):
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class RedisBackend(CredentialBackend):
    """Redis credential storage for shared deployments."""

    def __init__(self, redis_url: str, prefix: str = "clinic_console:"):
        import redis

        self.prefix = prefix
        try:
            self.client = redis.from_url(redis_url, decode_responses=True)
            self.client.ping()  # Test connection
            logger.info(f"Initialized Redis credential backend: {redis_url}")
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        return self.client.get(self._key(key))

    def set(self, key: str, value: str):
        self.client.set(self._key(key), value)

    def delete(self, key: str):
        self.client.delete(self._key(key))

    def exists(self, key: str) -> bool:
        return self.client.exists(self._key(key)) > 0


class CredentialStore:
    """
    Typed access to stored credentials.

    Strings are stored as-is; structured values (user, tenant, impersonation
    marker) are stored as JSON. A value that fails to decode reads as missing.
    """

    def __init__(self, backend: Optional[CredentialBackend] = None):
        self.backend = backend or create_backend()
        logger.debug(f"CredentialStore initialized with {type(self.backend).__name__}")

    def get(self, key: str) -> Optional[str]:
        return self.backend.get(key)

    def set(self, key: str, value: str):
        self.backend.set(key, value)

    def remove(self, *keys: str):
        for key in keys:
            self.backend.delete(key)

    def has(self, key: str) -> bool:
        return bool(self.backend.get(key))

    def get_json(self, key: str) -> Optional[Any]:
        raw = self.backend.get(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Stored value for '{key}' is not valid JSON, treating as missing")
            return None

    def set_json(self, key: str, value: Any):
        self.backend.set(key, json.dumps(value, default=str))

    def clear_session(self):
        """Forget the tenant session (token, user, tenant)."""
        self.remove(*SESSION_KEYS)
        logger.info("Cleared stored tenant session")


def create_backend(kind: Optional[str] = None) -> CredentialBackend:
    """Build the backend named by settings.credential_backend."""
    kind = kind or settings.credential_backend
    if kind == "memory":
        return InMemoryBackend()
    if kind == "redis":
        return RedisBackend(settings.redis_url, prefix=settings.redis_key_prefix)
    if kind == "file":
        return FileBackend(settings.credential_file)
    raise ValueError(f"Unknown credential backend: {kind}")
