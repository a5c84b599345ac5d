from __future__ import annotations

import contextlib
import json
import logging
import os
import sqlite3
import threading
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from tradedesk.document import backfill_document, default_document
from tradedesk.errors import StoreError
from tradedesk.runtime_profile import env_str

logger = logging.getLogger(__name__)


class DocumentStore:
    """Loads and saves the whole document; subclasses own the medium."""

    location = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def load(self) -> dict[str, Any]:
        raise NotImplementedError

    def save(self, document: dict[str, Any]) -> None:
        raise NotImplementedError

    def _serialize(self, document: dict[str, Any]) -> bytes:
        """Encode the document as strict UTF-8 JSON, or raise ``STORE_WRITE_FAILED``."""
        try:
            return json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            logger.warning("document_encode_failed location=%s error=%s", self.location, exc)
            raise StoreError(
                code="STORE_WRITE_FAILED",
                message=f"document at {self.location} is not encodable: {exc}",
            ) from exc

    def _initialize(self) -> dict[str, Any]:
        document = default_document()
        self.save(document)
        return document

    def _parse_or_reinitialize(self, raw: bytes | str) -> dict[str, Any]:
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            payload = json.loads(text)
        except ValueError as exc:
            logger.error("document_parse_failed location=%s error=%s; reinitializing", self.location, exc)
            return self._initialize()
        if not isinstance(payload, dict):
            logger.error(
                "document_parse_failed location=%s error=unexpected top-level %s; reinitializing",
                self.location,
                type(payload).__name__,
            )
            return self._initialize()
        return backfill_document(payload)


class InMemoryDocumentStore(DocumentStore):
    def __init__(self) -> None:
        super().__init__()
        self._blob: str | None = None

    def load(self) -> dict[str, Any]:
        with self._lock:
            if self._blob is None:
                return self._initialize()
            return self._parse_or_reinitialize(self._blob)

    def save(self, document: dict[str, Any]) -> None:
        with self._lock:
            self._blob = self._serialize(document).decode("utf-8")


class JsonFileDocumentStore(DocumentStore):
    """Keeps the document in one JSON file, replaced atomically on every save."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__()
        self._path = Path(path).expanduser()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self.location = str(self._path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        with self._lock:
            if not self._path.exists():
                logger.info("document_initialized location=%s", self.location)
                return self._initialize()
            try:
                raw = self._path.read_bytes()
            except OSError as exc:
                raise StoreError(
                    code="STORE_READ_FAILED",
                    message=f"failed to read document at {self.location}: {exc}",
                ) from exc
            return self._parse_or_reinitialize(raw)

    def save(self, document: dict[str, Any]) -> None:
        blob = self._serialize(document)
        tmp_path = self._path.with_name(f".{self._path.name}.{uuid.uuid4().hex[:8]}.tmp")
        with self._lock:
            try:
                with open(tmp_path, "wb") as handle:
                    handle.write(blob)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_path, self._path)
            except OSError as exc:
                logger.warning("document_write_failed location=%s error=%s", self.location, exc)
                raise StoreError(
                    code="STORE_WRITE_FAILED",
                    message=f"failed to write document at {self.location}: {exc}",
                ) from exc
            finally:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)


class SqliteDocumentStore(DocumentStore):
    """Snapshots the document as one JSON blob in a single-row SQLite table."""

    def __init__(self, db_path: str | os.PathLike[str]) -> None:
        super().__init__()
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self.location = f"sqlite:{self._db_path}"
        self._initialize_database()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._db_path))

    def _initialize_database(self) -> None:
        try:
            with contextlib.closing(self._connect()) as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS store_state (
                      id INTEGER PRIMARY KEY CHECK (id = 1),
                      payload TEXT NOT NULL
                    )
                    """
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(
                code="STORE_INIT_FAILED",
                message=f"failed to initialize {self.location}: {exc}",
            ) from exc

    def load(self) -> dict[str, Any]:
        with self._lock:
            try:
                with contextlib.closing(self._connect()) as conn:
                    row = conn.execute("SELECT payload FROM store_state WHERE id = 1").fetchone()
            except sqlite3.Error as exc:
                raise StoreError(
                    code="STORE_READ_FAILED",
                    message=f"failed to read document at {self.location}: {exc}",
                ) from exc
            if row is None:
                logger.info("document_initialized location=%s", self.location)
                return self._initialize()
            return self._parse_or_reinitialize(row[0] if isinstance(row[0], str) else "")

    def save(self, document: dict[str, Any]) -> None:
        blob = self._serialize(document).decode("utf-8")
        with self._lock:
            try:
                with contextlib.closing(self._connect()) as conn:
                    conn.execute(
                        """
                        INSERT INTO store_state(id, payload)
                        VALUES (1, ?)
                        ON CONFLICT(id) DO UPDATE SET payload = excluded.payload
                        """,
                        (blob,),
                    )
                    conn.commit()
            except sqlite3.Error as exc:
                logger.warning("document_write_failed location=%s error=%s", self.location, exc)
                raise StoreError(
                    code="STORE_WRITE_FAILED",
                    message=f"failed to write document at {self.location}: {exc}",
                ) from exc


def create_document_store_from_env(environ: Mapping[str, str] | None = None) -> DocumentStore:
    backend = env_str("TRADEDESK_STORE_BACKEND", default="json", environ=environ).lower()
    if backend == "json":
        return JsonFileDocumentStore(env_str("TRADEDESK_DB_PATH", default="db.json", environ=environ))
    if backend == "sqlite":
        return SqliteDocumentStore(env_str("TRADEDESK_SQLITE_PATH", default=".local/tradedesk.sqlite3", environ=environ))
    if backend == "memory":
        return InMemoryDocumentStore()
    raise ValueError(f"unsupported TRADEDESK_STORE_BACKEND: {backend}")
