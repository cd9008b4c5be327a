"""Shared fixtures: headless pygame and a seeded random generator."""
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pygame
import pytest


@pytest.fixture(scope="session", autouse=True)
def pygame_headless():
    pygame.display.init()
    pygame.font.init()
    yield
    pygame.quit()


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def surface():
    return pygame.Surface((800, 400))
