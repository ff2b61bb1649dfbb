"""Client-local session store for the bearer credential and cached profile.

Purpose: Single source of truth for "is there a credential, and what is it".

Pattern: Thin wrapper around SQLAlchemy over two named storage slots.
Validity is never tracked locally; the backend decides on every request.
"""
import json
import threading
from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hospital_admin import config
from hospital_admin.database_models import Base, StorageSlot
from hospital_admin.logging_config import get_logger

logger = get_logger(__name__)


class SessionStore:
    """
    Persists one credential and one profile blob across process runs.

    Responsibilities:
    - Store, read and clear the bearer credential
    - Cache the last fetched user profile
    - Track a generation number that advances whenever the credential
      changes, so in-flight calls can detect a session swap

    At most one credential is active; set_credential overwrites.
    """

    def __init__(self, database_url: str = None):
        """
        Initialize SessionStore with database connection.

        Args:
            database_url: SQLAlchemy connection string
                          (defaults to config.SESSION_DATABASE_URL)
        """
        database_url = database_url or config.SESSION_DATABASE_URL
        engine_kwargs = {"pool_pre_ping": True}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url:
                # One shared connection so every thread sees the same tables
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(database_url, **engine_kwargs)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine)
        self._lock = threading.RLock()
        self._generation = 0

    @property
    def generation(self) -> int:
        """Counter bumped on every credential write or clear."""
        with self._lock:
            return self._generation

    # Credential

    def set_credential(self, token: str) -> None:
        """
        Persist the bearer credential, overwriting any prior value.

        Args:
            token: Opaque bearer token returned by the backend
        """
        if not token:
            raise ValueError("Credential must be a non-empty string")

        with self._lock:
            self._write(config.CREDENTIAL_SLOT, token)
            self._generation += 1
        logger.info("credential_stored")

    def get_credential(self) -> Optional[str]:
        """Return the stored credential, or None when absent."""
        return self._read(config.CREDENTIAL_SLOT)

    def clear_credential(self) -> None:
        """Remove the stored credential. Safe to call when already absent."""
        with self._lock:
            removed = self._delete(config.CREDENTIAL_SLOT)
            self._generation += 1
        if removed:
            logger.info("credential_cleared")

    # Profile

    def set_profile(self, profile: dict) -> None:
        """Cache the user profile as JSON."""
        with self._lock:
            self._write(config.PROFILE_SLOT, json.dumps(profile))

    def get_profile(self) -> Optional[dict]:
        """Return the cached profile, or None when absent or unreadable."""
        raw = self._read(config.PROFILE_SLOT)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("cached_profile_unreadable")
            return None

    def clear_profile(self) -> None:
        with self._lock:
            self._delete(config.PROFILE_SLOT)

    def clear(self) -> None:
        """Remove both slots together (logout)."""
        with self._lock:
            self.clear_credential()
            self.clear_profile()

    # Storage helpers

    def _read(self, name: str) -> Optional[str]:
        with self._lock, self.SessionLocal() as db:
            slot = db.get(StorageSlot, name)
            return slot.value if slot else None

    def _write(self, name: str, value: str) -> None:
        with self._lock, self.SessionLocal() as db:
            slot = db.get(StorageSlot, name)
            if slot:
                slot.value = value
            else:
                db.add(StorageSlot(name=name, value=value))
            db.commit()

    def _delete(self, name: str) -> bool:
        with self._lock, self.SessionLocal() as db:
            deleted = db.query(StorageSlot).filter(StorageSlot.name == name).delete()
            db.commit()
        return deleted > 0
