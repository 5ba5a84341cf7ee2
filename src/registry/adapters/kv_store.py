"""Durable key-value store backing the record collection."""

import abc
import logging
from typing import Optional, Union

import redis

logger = logging.getLogger(__name__)


class AbstractKeyValueStore(abc.ABC):

    @abc.abstractmethod
    def get(self, key: str) -> Optional[Union[str, bytes]]:
        raise NotImplementedError

    @abc.abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the value under ``key`` in a single write."""
        raise NotImplementedError


class RedisKeyValueStore(AbstractKeyValueStore):
    """Redis implementation; SET replaces the whole value atomically."""

    def __init__(self, client: redis.Redis):
        self.client = client

    def get(self, key: str) -> Optional[Union[str, bytes]]:
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            logger.error(f"Failed to read key {key}: {e}")
            raise KeyValueStoreError(f"Failed to read {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(key, value)
        except redis.RedisError as e:
            logger.error(f"Failed to write key {key}: {e}")
            raise KeyValueStoreError(f"Failed to write {key}: {e}") from e


class KeyValueStoreError(Exception):
    """Exception raised when the durable store cannot be read or written."""
    pass
