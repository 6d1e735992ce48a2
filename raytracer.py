"""
raytracer.py - Clase principal del Ray Tracer
"""

import logging

from PIL import Image

from cpu_renderer import CPURenderer
from geometry import Camera
from tone_map import to_rgb8

logger = logging.getLogger(__name__)


class RayTracer:
    """Ray tracer recursivo en CPU: cámara + renderizador + salida a imagen."""

    def __init__(self, width=640, height=480, camera=None, renderer=None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Tamaño de imagen no válido: {width}x{height}")
        self.width = width
        self.height = height
        self.renderer = renderer if renderer is not None else CPURenderer()
        self.camera = camera if camera is not None else Camera(aspect_ratio=width/height)

    def set_camera(self, camera):
        self.camera = camera

    def render(self, scene):
        try:
            return self.renderer.render(scene, self.camera, self.width, self.height)
        except Exception:
            logger.exception("Error en renderizado de %dx%d", self.width, self.height)
            raise

    def save(self, image, path, gamma=None):
        """Guarda la imagen (PNG, JPG...) según la extensión de path."""
        Image.fromarray(to_rgb8(image, gamma)).save(path)
