"""
Local disk implementation of object storage.

Keys map to files below a root directory, so "production/index.html" lives
at {root_dir}/production/index.html. Content types are not persisted.
"""
import os
import shutil
from typing import List

from src.errors import NotFound, ObjectStoreUnavailable
from src.object_store import ObjectStore


class LocalDiskObjectStore(ObjectStore):
    """Object store that keeps artifacts as files on local disk."""

    def __init__(self, root_dir: str = "state/site"):
        """
        Initialize local disk object store.

        Args:
            root_dir: Directory that acts as the bucket root (default: "state/site")
        """
        self.root_dir = root_dir
        os.makedirs(self.root_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        parts = [part for part in key.split("/") if part]
        if not parts or any(part == ".." for part in parts):
            raise NotFound(f"Invalid object key: {key!r}")
        return os.path.join(self.root_dir, *parts)

    def put(self, key: str, body: bytes, content_type: str) -> None:
        path = self._path(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as f:
                f.write(body)
        except OSError as e:
            raise ObjectStoreUnavailable(f"Failed to write {key}: {e}") from e

    def get(self, key: str) -> bytes:
        path = self._path(key)
        if not os.path.isfile(path):
            raise NotFound(f"Object not found: {key}")
        try:
            with open(path, 'rb') as f:
                return f.read()
        except OSError as e:
            raise ObjectStoreUnavailable(f"Failed to read {key}: {e}") from e

    def exists(self, key: str) -> bool:
        try:
            return os.path.isfile(self._path(key))
        except NotFound:
            return False

    def copy(self, src_key: str, dst_key: str) -> None:
        src_path = self._path(src_key)
        if not os.path.isfile(src_path):
            raise NotFound(f"Object not found: {src_key}")
        dst_path = self._path(dst_key)
        try:
            os.makedirs(os.path.dirname(dst_path), exist_ok=True)
            shutil.copyfile(src_path, dst_path)
        except OSError as e:
            raise ObjectStoreUnavailable(f"Failed to copy {src_key} to {dst_key}: {e}") from e

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise ObjectStoreUnavailable(f"Failed to delete {key}: {e}") from e

    def list_keys(self, prefix: str) -> List[str]:
        keys = []
        for dirpath, _, filenames in os.walk(self.root_dir):
            rel_dir = os.path.relpath(dirpath, self.root_dir)
            for filename in filenames:
                rel_path = filename if rel_dir == "." else os.path.join(rel_dir, filename)
                key = rel_path.replace(os.sep, "/")
                if key.startswith(prefix):
                    keys.append(key)
        return sorted(keys)

    def list_prefixes(self, prefix: str) -> List[str]:
        prefixes = set()
        for key in self.list_keys(prefix):
            remainder = key[len(prefix):]
            if "/" in remainder:
                prefixes.add(prefix + remainder.split("/", 1)[0] + "/")
        return sorted(prefixes)
