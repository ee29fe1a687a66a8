"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test files.
"""

import os

# Headless SDL before pygame is imported anywhere
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest
import pygame
from typing import Generator


@pytest.fixture(scope="session", autouse=True)
def pygame_init() -> Generator[None, None, None]:
    """
    Initialize pygame for the test session.
    This runs once before all tests and cleans up after.
    """
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def rng():
    """
    A SeededRNG on the default seed.
    """
    from engine.rng import SeededRNG
    return SeededRNG(12345)


@pytest.fixture
def drawer():
    """
    A blank 48x48 PixelDrawer.
    """
    from engine.drawer import PixelDrawer
    return PixelDrawer.create(48, 48)


@pytest.fixture
def texture_cache():
    """
    An empty TextureCache.
    """
    from engine.texture_cache import TextureCache
    return TextureCache()


@pytest.fixture
def config(tmp_path):
    """
    Default GeneratorConfig saved to a temporary file.
    """
    from engine.config import GeneratorConfig
    cfg = GeneratorConfig()
    cfg.save(tmp_path / "generator_settings.json")
    return cfg


def surface_bytes(surface: pygame.Surface) -> bytes:
    return pygame.image.tobytes(surface, "RGBA")
