"""
basic_ops.py - Operaciones vectoriales básicas compiladas con Numba (CPU)

Todos los vectores son arrays de numpy de forma (3,) y dtype float64.
"""

import math

import numpy as np
from numba import njit


@njit
def vec3(x, y, z):
    out = np.empty(3, dtype=np.float64)
    out[0] = x
    out[1] = y
    out[2] = z
    return out


@njit
def dot(a, b):
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


@njit
def length(v):
    return math.sqrt(v[0]*v[0] + v[1]*v[1] + v[2]*v[2])


@njit
def normalize(v):
    norm = length(v)
    if norm == 0.0:
        return vec3(v[0], v[1], v[2])
    return vec3(v[0]/norm, v[1]/norm, v[2]/norm)


@njit
def subtract(a, b):
    return vec3(a[0]-b[0], a[1]-b[1], a[2]-b[2])


@njit
def add(a, b):
    return vec3(a[0]+b[0], a[1]+b[1], a[2]+b[2])


@njit
def scale(v, s):
    return vec3(v[0]*s, v[1]*s, v[2]*s)


@njit
def cross(a, b):
    return vec3(
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0]
    )


@njit
def reflect(incident, normal):
    """Dirección espejo: d - 2 (d·n) n"""
    dot_in = dot(incident, normal)
    return subtract(incident, scale(normal, 2.0 * dot_in))
