import abc
import json
import logging
from typing import List, Optional

from registry.adapters.kv_store import AbstractKeyValueStore, KeyValueStoreError
from registry.domain import model

logger = logging.getLogger(__name__)


class AbstractRepository(abc.ABC):
    """Append-only collection of case records, in insertion order."""

    def add(self, record: model.CaseRecord) -> str:
        self._add(record)
        return record.id

    def get(self, record_id) -> Optional[model.CaseRecord]:
        return self._get(record_id)

    def list(self) -> List[model.CaseRecord]:
        return self._list()

    @abc.abstractmethod
    def _add(self, record: model.CaseRecord):
        raise NotImplementedError

    @abc.abstractmethod
    def _get(self, record_id) -> Optional[model.CaseRecord]:
        raise NotImplementedError

    @abc.abstractmethod
    def _list(self) -> List[model.CaseRecord]:
        raise NotImplementedError


class KeyValueRepository(AbstractRepository):
    """
    Whole collection serialized as one JSON array under a single key.

    Added records are staged until flush(), which rewrites the collection in
    one store write. Only a successful write makes them visible.
    """

    def __init__(self, store: AbstractKeyValueStore, key: str):
        self.store = store
        self.key = key
        self._records = []  # type: List[model.CaseRecord]
        self._pending = []  # type: List[model.CaseRecord]

    def load(self) -> List[model.CaseRecord]:
        """Restore the collection from the durable store."""
        try:
            raw = self.store.get(self.key)
        except KeyValueStoreError as e:
            raise RecordStoreError(f"Could not load records: {e}") from e

        if raw is None:
            records = []
        else:
            try:
                records = [model.CaseRecord.from_dict(item) for item in json.loads(raw)]
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.error(f"Stored collection under {self.key} is corrupt: {e}")
                raise RecordStoreError(f"Stored collection under {self.key} is corrupt") from e

        self._records = records
        self._pending = []
        logger.info(f"Loaded {len(records)} records from {self.key}")
        return list(records)

    def flush(self):
        if not self._pending:
            return

        collection = self._records + self._pending
        payload = json.dumps([record.to_dict() for record in collection], ensure_ascii=False)
        try:
            self.store.set(self.key, payload)
        except KeyValueStoreError as e:
            raise RecordStoreError(f"Could not persist records: {e}") from e

        logger.info(f"Persisted {len(self._pending)} new records ({len(collection)} total)")
        self._records = collection
        self._pending = []

    def discard(self):
        if self._pending:
            logger.info(f"Discarding {len(self._pending)} unsaved records")
        self._pending = []

    def _add(self, record):
        if self._get(record.id) or any(r.id == record.id for r in self._pending):
            raise DuplicateRecordError(f"Record {record.id} already exists")
        self._pending.append(record)

    def _get(self, record_id):
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def _list(self):
        return list(self._records)


class RecordStoreError(Exception):
    """Exception raised when the collection cannot be loaded or persisted."""
    pass


class DuplicateRecordError(RecordStoreError):
    pass
