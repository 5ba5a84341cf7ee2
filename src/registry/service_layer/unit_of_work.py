# pylint: disable=attribute-defined-outside-init
from __future__ import annotations
import abc
from functools import lru_cache
from typing import Optional

import redis

import config
from insights.adapters import text_generation_client
from registry.adapters import kv_store, repository


class AbstractUnitOfWork(abc.ABC):
    records: repository.AbstractRepository
    text_generator: text_generation_client.AbstractTextGenerationClient

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args):
        self.rollback()

    def commit(self):
        self._commit()

    @abc.abstractmethod
    def _commit(self):
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self):
        raise NotImplementedError


@lru_cache()
def default_store() -> kv_store.AbstractKeyValueStore:
    return kv_store.RedisKeyValueStore(redis.Redis(**config.get_redis_host_and_port()))


class KeyValueUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self,
        store: Optional[kv_store.AbstractKeyValueStore] = None,
        key: Optional[str] = None,
        text_generator_impl: Optional[text_generation_client.AbstractTextGenerationClient] = None,
    ):
        self.store = store or default_store()
        self.key = key or config.get_records_key()
        self.text_generator_impl = text_generator_impl

    def __enter__(self):
        self.records = repository.KeyValueRepository(self.store, self.key)
        self.records.load()
        return super().__enter__()

    @property
    def text_generator(self) -> text_generation_client.AbstractTextGenerationClient:
        # built on first use so record reads never touch the service settings
        if self.text_generator_impl is None:
            self.text_generator_impl = text_generation_client.GeminiTextGenerationClient()
        return self.text_generator_impl

    def _commit(self):
        self.records.flush()

    def rollback(self):
        self.records.discard()
