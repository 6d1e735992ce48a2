"""
cpu_renderer.py - Renderizado en CPU (Phong + sombras + reflexión + refracción)
"""

import logging
import math
import time
from collections import namedtuple

import numpy as np

from basic_ops import dot, length, normalize, reflect
from geometry import Ray, as_vec3

logger = logging.getLogger(__name__)

EPSILON = 0.01           # Desplazamiento de los rayos secundarios
REFLECTION_LIMIT = 6
NO_HIT = -1.0
VACUUM_INDEX = 1.0
BACKGROUND = (1.0, 0.0, 0.0)


class Payload(namedtuple("Payload", ["color", "num_bounces", "refractive_index"])):
    """
    Estado de la recursión de un píxel. Es inmutable: cada llamada devuelve
    uno nuevo y quien llama continúa con él.
    """
    __slots__ = ()

    @classmethod
    def initial(cls):
        return cls(np.zeros(3), 0, VACUUM_INDEX)


def phong_color(ray, info, light) -> np.ndarray:
    material = info.material
    normal = info.normal

    light_vec = normalize(light.position - info.hit_point)
    view_vec = normalize(ray.origin - info.hit_point)

    reflected_light = 2.0 * normal * dot(light_vec, normal) - light_vec
    cos_alpha = max(0.0, dot(reflected_light, view_vec))

    specular = material.specular * cos_alpha ** material.glossiness
    # Cada canal se recorta a 0 por separado
    diffuse = np.maximum(0.0, material.diffuse * dot(light_vec, normal))
    ambient = material.ambient

    return light.intensity * (specular + diffuse + ambient)


def is_in_shadow(point, scene, epsilon=EPSILON) -> bool:
    light_pos = scene.light.position
    start = point + epsilon * normalize(light_pos - point)
    shadow_ray = Ray(start, normalize(light_pos - start))

    # Solo cuentan los oclusores anteriores a la luz
    light_distance = length(light_pos - point)
    for obj in scene:
        info = obj.intersect(shadow_ray)
        if info is not None and info.time < light_distance:
            return True
    return False


def reflection_color(ray, info, scene, payload, surface_color,
                     epsilon=EPSILON, reflection_limit=REFLECTION_LIMIT):
    payload = payload._replace(num_bounces=payload.num_bounces + 1)
    if payload.num_bounces >= reflection_limit:
        return surface_color, payload

    direction = normalize(reflect(ray.direction, info.normal))
    reflection_ray = Ray(info.hit_point + epsilon * direction, direction)
    _, payload = cast_ray(reflection_ray, scene, payload, epsilon, reflection_limit)
    reflectivity = info.material.reflection
    return reflectivity * payload.color + (1 - reflectivity) * surface_color, payload


def refraction_color(ray, info, scene, payload, base_color,
                     epsilon=EPSILON, reflection_limit=REFLECTION_LIMIT):
    material = info.material
    # Solo se refracta al entrar desde el vacío, nunca desde dentro de un medio
    if material.refraction <= 0 or payload.refractive_index != VACUUM_INDEX:
        return base_color, payload

    ratio = -payload.refractive_index / material.refractive_index
    payload = payload._replace(refractive_index=material.refractive_index)

    cos_i = dot(info.normal, -ray.direction)
    k = 1.0 - ratio ** 2 * (1.0 - cos_i ** 2)
    if k < 0:
        # Reflexión total interna: la refracción no aporta nada
        return base_color, payload

    direction = (ratio * cos_i - math.sqrt(k)) * info.normal - ratio * (-ray.direction)
    refraction_ray = Ray(info.hit_point + epsilon * direction, direction)
    _, payload = cast_ray(refraction_ray, scene, payload, epsilon, reflection_limit)

    refraction = material.refraction
    return refraction * payload.color + (1 - refraction) * base_color, payload


def cast_ray(ray, scene, payload=None, epsilon=EPSILON, reflection_limit=REFLECTION_LIMIT):
    """
    Traza un rayo de forma recursiva.

    Devuelve (time, payload): time es la distancia al impacto o NO_HIT, y
    payload.color el color resultante. El contador de rebotes es del píxel
    entero, no de la profundidad, así que la reflexión siempre termina al
    alcanzar reflection_limit.
    """
    if payload is None:
        payload = Payload.initial()

    info = scene.find_closest_hit(ray)
    if info is None:
        return NO_HIT, payload._replace(color=np.zeros(3))

    # En sombra solo queda la luz ambiente
    if is_in_shadow(info.hit_point, scene, epsilon):
        surface_color = info.material.ambient.copy()
    else:
        surface_color = phong_color(ray, info, scene.light)

    color, payload = reflection_color(ray, info, scene, payload, surface_color, epsilon, reflection_limit)
    color, payload = refraction_color(ray, info, scene, payload, color, epsilon, reflection_limit)

    return info.time, payload._replace(color=color)


class CPURenderer:
    def __init__(self, reflection_limit=REFLECTION_LIMIT, epsilon=EPSILON, background=BACKGROUND):
        self.reflection_limit = reflection_limit
        self.epsilon = epsilon
        self.background = as_vec3(background)

    def render_pixel(self, scene, ray) -> np.ndarray:
        hit_time, payload = cast_ray(ray, scene, Payload.initial(), self.epsilon, self.reflection_limit)
        if hit_time > 0:
            return payload.color
        return self.background

    def render(self, scene, camera, width, height):
        if width <= 0 or height <= 0:
            raise ValueError(f"Tamaño de imagen no válido: {width}x{height}")

        logger.info("Renderizando %dx%d con %d primitivas", width, height, len(scene))
        start_time = time.time()
        image = np.zeros((height, width, 3), dtype=np.float64)

        for y in range(height):
            for x in range(width):
                u = (x + 0.5) / width
                v = (height - y - 0.5) / height
                image[y, x] = self.render_pixel(scene, camera.get_ray(u, v))
            logger.debug("Fila %d/%d completada", y + 1, height)

        logger.info("Frame completado en %.2f segundos", time.time() - start_time)
        return image
