"""
Abstract interface for object storage backends.

Holds rendered HTML/CSS artifacts and their backups, addressed by
path-like keys ("production/articles/a1-en.html"). Writes overwrite.
"""
import logging
from abc import ABC, abstractmethod
from typing import List

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
CSS_CONTENT_TYPE = "text/css; charset=utf-8"


class ObjectStore(ABC):
    """Abstract base class for object storage backends."""

    @abstractmethod
    def put(self, key: str, body: bytes, content_type: str) -> None:
        """
        Store an object, replacing any existing object at the key.

        Args:
            key: Object key
            body: Object bytes
            content_type: MIME type served with the object

        Raises:
            ObjectStoreUnavailable: If the backend fails
        """

    @abstractmethod
    def get(self, key: str) -> bytes:
        """
        Read an object.

        Args:
            key: Object key

        Returns:
            Object bytes

        Raises:
            NotFound: If no object exists at the key
            ObjectStoreUnavailable: If the backend fails
        """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """
        Check whether an object exists.

        Returns False only for a definite "not there"; backend failures raise.

        Raises:
            ObjectStoreUnavailable: If the backend fails
        """

    @abstractmethod
    def copy(self, src_key: str, dst_key: str) -> None:
        """
        Copy an object to another key, overwriting the destination.

        Raises:
            NotFound: If src_key does not exist
            ObjectStoreUnavailable: If the backend fails
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Delete an object. Deleting a missing key is not an error.

        Raises:
            ObjectStoreUnavailable: If the backend fails
        """

    @abstractmethod
    def list_keys(self, prefix: str) -> List[str]:
        """
        List every object key starting with prefix, sorted.

        Raises:
            ObjectStoreUnavailable: If the backend fails
        """

    @abstractmethod
    def list_prefixes(self, prefix: str) -> List[str]:
        """
        List the immediate "sub-directories" under prefix.

        Each entry ends with "/" and includes the given prefix, e.g.
        list_prefixes("backups/") -> ["backups/articles/", "backups/plp/"].

        Raises:
            ObjectStoreUnavailable: If the backend fails
        """

    def copy_prefix(self, src_prefix: str, dst_prefix: str) -> List[str]:
        """
        Copy every object under src_prefix to the same relative key under dst_prefix.

        Args:
            src_prefix: Source prefix (ends with "/")
            dst_prefix: Destination prefix (ends with "/")

        Returns:
            Destination keys written, in copy order
        """
        written = []
        for key in self.list_keys(src_prefix):
            dst_key = dst_prefix + key[len(src_prefix):]
            self.copy(key, dst_key)
            logger.info("Copied %s -> %s", key, dst_key)
            written.append(dst_key)
        return written
