"""Scoped acquisition of transient engine resources.

``ScopedResource`` pairs one acquisition with exactly one release. It is an
async context manager so that a phase can hold a worker across ``await``
points and still release it on every exit path, including cancellation and
thrown failures.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScopedResource(Generic[T]):
    def __init__(
        self,
        acquire: Callable[[], T],
        release: Callable[[T], Any],
        name: str = "resource",
    ) -> None:
        self._acquire = acquire
        self._release = release
        self.name = name
        self._resource: Optional[T] = None
        self._entered = False
        self.released = False

    async def __aenter__(self) -> T:
        if self._entered:
            raise RuntimeError(f"{self.name} scope cannot be re-entered")
        self._entered = True
        self._resource = self._acquire()
        logger.debug("Acquired %s", self.name)
        return self._resource

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        resource, self._resource = self._resource, None
        if resource is None or self.released:
            return False
        self.released = True
        try:
            self._release(resource)
            logger.debug("Released %s", self.name)
        except Exception:
            if exc is None:
                raise
            # Keep the original failure; the release error is only logged
            logger.exception("Failed to release %s", self.name)
        return False


def worker_scope(factory: Callable[[str], Any], language: str) -> ScopedResource[Any]:
    """Scope one engine worker: ``factory(language)`` on enter, ``terminate()`` on exit."""
    return ScopedResource(
        acquire=lambda: factory(language),
        release=lambda worker: worker.terminate(),
        name=f"worker[{language}]",
    )


__all__ = [
    "ScopedResource",
    "worker_scope",
]
