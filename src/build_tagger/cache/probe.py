"""Probing registries and the local daemon for images that already exist."""

from __future__ import annotations

import threading
from typing import Callable, Iterable, Optional

import docker
from docker.errors import APIError, ImageNotFound, NotFound


class CacheLookupError(Exception):
    """Raised when a reference cannot be checked for reasons other than absence."""

    def __init__(self, reference: str, cause: Exception):
        super().__init__(f"failed to check image '{reference}': {cause}")
        self.reference = reference
        self.cause = cause


class DockerImageChecker:
    """
    Answers whether an image reference exists.

    In remote mode the registry is asked for the image's distribution data,
    otherwise the local Docker daemon is asked for the image. One checker may
    be shared by many threads; they all use a single client.
    """

    def __init__(self, client: Optional[docker.DockerClient] = None, remote: bool = True):
        self._client = client
        self._owns_client = client is None
        self._lock = threading.Lock()
        self.remote = remote

    @property
    def client(self) -> docker.DockerClient:
        with self._lock:
            if self._client is None:
                self._client = docker.from_env()
            return self._client

    def close(self) -> None:
        """Closes the client if this checker created it."""
        with self._lock:
            if self._owns_client and self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> DockerImageChecker:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __call__(self, reference: str) -> bool:
        try:
            if self.remote:
                self.client.images.get_registry_data(reference)
            else:
                self.client.images.get(reference)
        except (ImageNotFound, NotFound):
            return False
        except APIError as e:
            raise CacheLookupError(reference, e) from e
        return True


class ImageCache:
    """Finds the first existing image among an ordered list of candidates."""

    def __init__(self, exists: Optional[Callable[[str], bool]] = None):
        self.exists = exists or DockerImageChecker()

    def find(self, candidates: Iterable[str]) -> Optional[str]:
        """
        Returns the first candidate that exists, or None.

        Candidates are checked strictly in order and probing stops at the
        first hit.
        """
        for reference in candidates:
            if self.exists(reference):
                return reference
        return None
