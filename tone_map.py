"""
tone_map.py - Conversión de los colores calculados a píxeles mostrables
"""

import numpy as np


def clamp(x: float, rgbs: np.ndarray) -> np.ndarray:
    """
    Recorta cada componente RGB al intervalo [0, x].
    rgbs: array con última dimensión 3
    """
    return np.clip(rgbs, 0.0, x)


def gamma_correct(rgbs: np.ndarray, gamma: float) -> np.ndarray:
    """
    Aplica corrección gamma a colores ya recortados a [0, 1].
    """
    return np.power(rgbs, 1.0 / gamma)


def to_rgb8(image: np.ndarray, gamma=None) -> np.ndarray:
    """Imagen float (H, W, 3) -> uint8 lista para guardar o mostrar."""
    rgbs = clamp(1.0, image)
    if gamma:
        rgbs = gamma_correct(rgbs, gamma)
    return np.round(rgbs * 255.0).astype(np.uint8)
