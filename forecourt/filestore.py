# forecourt/filestore.py
"""Listing store backed by a single JSON array on disk.

Writes never touch the live file in place: the new document is written to a
temp file next to it, fsynced, and swapped in with os.replace. When a backup
path is configured the previous document is copied there first.
"""
import json
import os
import shutil
import tempfile
import threading
import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import ValidationError
from .schemas import Listing
from .store import DuplicateNameError, ListingStore, names_match, newest_first
from .utils import logger


class JsonFileListingStore(ListingStore):
    # one writer at a time per process, shared by every store on the same file
    _locks = {}
    _locks_guard = threading.Lock()

    def __init__(self, path, backup_path=None):
        self.path = os.path.abspath(path)
        self.backup_path = os.path.abspath(backup_path) if backup_path else None
        with self._locks_guard:
            self._lock = self._locks.setdefault(self.path, threading.RLock())

    def _read(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as fh:
            raw = fh.read().strip()
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"{self.path} does not hold a JSON array")
        return data

    def _write(self, docs: List[dict]):
        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".cars-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(docs, fh, ensure_ascii=False, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            if self.backup_path and os.path.exists(self.path):
                shutil.copy2(self.path, self.backup_path)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _listing(self, doc) -> Optional[Listing]:
        # a broken record is skipped on reads; writes carry it through untouched
        try:
            return Listing.model_validate(doc)
        except ValidationError as e:
            logger.warning("Skipping malformed car %r in %s: %s",
                           doc.get("name") if isinstance(doc, dict) else doc, self.path, e)
            return None

    def list_all(self) -> List[Listing]:
        listings = (self._listing(d) for d in self._read())
        return newest_first([l for l in listings if l is not None])

    def find_by_name(self, name: str) -> Optional[Listing]:
        for doc in self._read():
            if isinstance(doc, dict) and names_match(doc.get("name"), name):
                listing = self._listing(doc)
                if listing is not None:
                    return listing
        return None

    def insert(self, listing: Listing) -> Listing:
        with self._lock:
            docs = self._read()
            if any(names_match(d.get("name"), listing.name) for d in docs):
                raise DuplicateNameError(listing.name)
            stored = listing.model_copy(update={"id": listing.id or uuid.uuid4().hex})
            docs.append(stored.to_document())
            self._write(docs)
        logger.info("Stored car %s in %s", stored.name, self.path)
        return stored

    def delete_by_name(self, name: str) -> int:
        with self._lock:
            docs = self._read()
            kept = [d for d in docs if not names_match(d.get("name"), name)]
            removed = len(docs) - len(kept)
            if removed:
                self._write(kept)
        return removed

    def mark_sold(self, name: str, sold_on: str, now: datetime) -> Optional[str]:
        with self._lock:
            docs = self._read()
            matches = [d for d in docs if names_match(d.get("name"), name)]
            if not matches:
                return None
            existing = next((d["soldDate"] for d in matches if d.get("soldDate")), None)
            sold_date = existing or sold_on
            for doc in matches:
                doc["sold"] = True
                doc["soldDate"] = doc.get("soldDate") or sold_date
                doc["updatedAt"] = now.isoformat()
            self._write(docs)
        return sold_date
