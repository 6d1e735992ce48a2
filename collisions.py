"""
collisions.py - Intersecciones rayo-primitiva compiladas con Numba

Cada kernel devuelve (hit, t), donde t es el parámetro del rayo en el punto
de impacto. Ningún caso degenerado lanza excepciones: simplemente no hay
impacto.
"""

import math

from numba import njit

from basic_ops import add, cross, dot, scale, subtract


@njit
def hit_sphere(origin, direction, center, radius):
    oc = subtract(origin, center)
    a = dot(direction, direction)
    if a == 0.0:
        return False, 0.0  # Rayo degenerado
    b = dot(scale(direction, 2.0), oc)
    c = dot(oc, oc) - radius * radius

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return False, 0.0

    # Solo la raíz cercana. Si el origen está dentro de la esfera o sobre su
    # superficie no es positiva y el rayo no cuenta como impacto.
    t = (-b - math.sqrt(discriminant)) / (2.0 * a)
    if t <= 0.0:
        return False, 0.0

    return True, t


@njit
def hit_plane(origin, direction, point, normal):
    angle = dot(direction, normal)
    if angle == 0.0:
        return False, 0.0  # Rayo paralelo al plano

    t = dot(subtract(point, origin), normal) / angle
    if t <= 0.0:
        return False, 0.0

    return True, t


@njit
def edge_side(normal, vertex, next_vertex, point):
    """Área con signo del punto respecto a la arista vertex -> next_vertex"""
    edge = subtract(next_vertex, vertex)
    return dot(normal, cross(edge, subtract(point, vertex)))


@njit
def hit_triangle(origin, direction, pt1, pt2, pt3, normal):
    hit, t = hit_plane(origin, direction, pt1, normal)
    if not hit:
        return False, 0.0

    point = add(origin, scale(direction, t))

    # Dentro si el punto queda del mismo lado de las tres aristas
    if edge_side(normal, pt1, pt2, point) < 0.0:
        return False, 0.0
    if edge_side(normal, pt2, pt3, point) < 0.0:
        return False, 0.0
    if edge_side(normal, pt3, pt1, point) < 0.0:
        return False, 0.0

    return True, t
