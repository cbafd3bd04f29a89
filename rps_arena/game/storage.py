"""Key-value stores for saved progress.

Values are JSON strings keyed by name, like browser localStorage. Stores
raise StorageError when they cannot read or write; callers decide whether
that matters.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod

from ..utils.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key):
        pass

    @abstractmethod
    def set(self, key, value):
        pass


class MemoryStore(KeyValueStore):
    def __init__(self, data=None):
        self.data = dict(data or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


class JsonFileStore(KeyValueStore):
    """All keys live in one JSON object on disk. Writes replace the file atomically."""

    def __init__(self, path):
        self.path = path

    def _read_all(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to read store '%s': %s", self.path, e)
            raise StorageError(f"could not read {self.path}: {e}")
        if not isinstance(data, dict):
            logger.error("Store '%s' does not hold a JSON object", self.path)
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key):
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            return json.dumps(value)
        return value

    def set(self, key, value):
        try:
            data = self._read_all()
        except StorageError:
            # A corrupt file is overwritten rather than blocking every save
            data = {}
        data[key] = value

        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".store-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error("Failed to write store '%s': %s", self.path, e)
            raise StorageError(f"could not write {self.path}: {e}")
