"""
Texture cache.

String-keyed registry of generated surfaces. Callers own the lifecycle:
nothing is evicted automatically, so scenes invalidate their prefixes on
teardown.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional

import pygame

from engine.error_handler import logger


class TextureCache:
    """Explicit replacement for a global texture manager."""

    def __init__(self) -> None:
        self._textures: Dict[str, pygame.Surface] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._textures

    def __len__(self) -> int:
        return len(self._textures)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._textures))

    def has(self, key: str) -> bool:
        return key in self._textures

    def get(self, key: str) -> Optional[pygame.Surface]:
        return self._textures.get(key)

    def put(self, key: str, surface: pygame.Surface) -> None:
        if key in self._textures:
            logger.debug(f"Replacing cached texture {key}")
        self._textures[key] = surface

    def get_or_create(self, key: str, factory: Callable[[], pygame.Surface]) -> pygame.Surface:
        """Cached texture for ``key``; ``factory`` runs only on a miss."""
        surface = self._textures.get(key)
        if surface is None:
            surface = factory()
            self._textures[key] = surface
            logger.debug(f"Generated texture {key} ({surface.get_width()}x{surface.get_height()})")
        return surface

    def remove(self, key: str) -> bool:
        return self._textures.pop(key, None) is not None

    def invalidate(self, prefix: str) -> List[str]:
        """Drop every texture whose key starts with ``prefix``; returns the keys."""
        doomed = [key for key in self._textures if key.startswith(prefix)]
        for key in doomed:
            del self._textures[key]
        if doomed:
            logger.debug(f"Invalidated {len(doomed)} textures with prefix {prefix!r}")
        return doomed

    def keys(self, prefix: str = "") -> List[str]:
        return [key for key in self._textures if key.startswith(prefix)]

    def clear(self) -> None:
        self._textures.clear()
