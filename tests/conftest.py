import os
import sys

import matplotlib
import pytest

# Módulos planos en la raíz del proyecto
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

matplotlib.use("Agg")

from geometry import Light, Material, Plane, Scene, Sphere  # noqa: E402


@pytest.fixture
def matte():
    return Material([0.1, 0.1, 0.1], [0.5, 0.2, 0.1], [0.3, 0.3, 0.3], 10, 0.0, 0.0, 1.0)


@pytest.fixture
def ambient_only():
    """Material cuyo color no depende de la luz ni de la sombra."""
    def make(ambient, **kwargs):
        return Material(ambient, [0, 0, 0], [0, 0, 0], 10, **kwargs)
    return make


@pytest.fixture
def floor_scene(matte):
    """Suelo y=0 iluminado desde (0, 10, 0)."""
    scene = Scene(Light([0, 10, 0], [1, 1, 1]))
    scene.add_plane(Plane([0, 0, 0], [0, 1, 0], matte))
    return scene


@pytest.fixture
def occluder():
    return Sphere([0, 5, 0], 1.0, Material())
