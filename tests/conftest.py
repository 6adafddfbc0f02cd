"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Make the flat modules under python/ importable without installing
python_dir = Path(__file__).parent.parent / "python"
sys.path.insert(0, str(python_dir))

from scene import Scene, default_scene_data  # noqa: E402
from shapes import Sphere, Disk, PointLight  # noqa: E402


@pytest.fixture
def red_sphere():
    """The sphere from the reference scene, matte."""
    return Sphere((0.0, 0.0, -20.0), 4.0, color=(1.0, 0.32, 0.36), reflectivity=0.0)


@pytest.fixture
def facing_mirrors():
    """Two perfect mirrors facing each other along the z axis."""
    near = Disk((0.0, 0.0, 0.0), 10.0, normal=(0.0, 0.0, -1.0), reflectivity=1.0)
    far = Disk((0.0, 0.0, -10.0), 10.0, normal=(0.0, 0.0, 1.0), reflectivity=1.0)
    return Scene([near, far])


@pytest.fixture
def small_scene_data():
    """Default scene shrunk to a thumbnail so renders stay fast."""
    return default_scene_data(width=8, height=6)


@pytest.fixture
def lit_sphere_scene(red_sphere):
    return Scene([red_sphere], [PointLight((0.0, 0.0, 0.0))])
