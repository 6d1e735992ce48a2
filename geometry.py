"""
geometry.py - Definición de materiales, figuras geométricas y escena 3D
"""

import math

import numpy as np

from basic_ops import cross, length, normalize
from collisions import hit_plane, hit_sphere, hit_triangle


def as_vec3(values) -> np.ndarray:
    """Convierte cualquier secuencia de 3 números a un vector float64."""
    v = np.array(values, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"Se esperaba un vector de 3 componentes, recibido {values!r}")
    return v


class Material:
    """
    Material Phong con reflexión y refracción.

    No se modifica tras construirse: todas las primitivas que lo usan
    comparten la misma instancia.
    """
    def __init__(self, ambient=(1.0, 1.0, 1.0), diffuse=(1.0, 1.0, 1.0), specular=(1.0, 1.0, 1.0),
                 glossiness=10.0, reflection=0.0, refraction=0.0, refractive_index=1.0):
        self.ambient = as_vec3(ambient)
        self.diffuse = as_vec3(diffuse)
        self.specular = as_vec3(specular)
        self.glossiness = float(glossiness)   # Exponente especular
        self.reflection = float(reflection)
        self.refraction = float(refraction)
        self.refractive_index = float(refractive_index)

        if self.glossiness <= 0:
            raise ValueError(f"glossiness debe ser > 0, recibido {glossiness}")
        if self.refraction > 0 and self.refractive_index <= 0:
            raise ValueError("Un material refractivo necesita refractive_index > 0")

    def __repr__(self):
        return (f"Material(ambient={self.ambient.tolist()}, diffuse={self.diffuse.tolist()}, "
                f"specular={self.specular.tolist()}, glossiness={self.glossiness}, "
                f"reflection={self.reflection}, refraction={self.refraction}, "
                f"refractive_index={self.refractive_index})")


class Light:
    """Fuente de luz puntual."""
    def __init__(self, position=(-150.0, 300.0, 10.0), intensity=(1.0, 1.0, 1.0)):
        self.position = as_vec3(position)
        self.intensity = as_vec3(intensity)


class Ray:
    """Rayo con origen y dirección (unitaria por convención, no se comprueba)."""
    def __init__(self, origin, direction):
        self.origin = as_vec3(origin)
        self.direction = as_vec3(direction)

    def at(self, t: float) -> np.ndarray:
        return self.origin + t * self.direction

    def __repr__(self):
        return f"Ray(origin={self.origin.tolist()}, direction={self.direction.tolist()})"


class IntersectInfo:
    """Resultado de un impacto válido. time siempre es > 0."""
    def __init__(self, hit_point, normal, material, time):
        self.hit_point = hit_point
        self.normal = normal
        self.material = material
        self.time = time

    def __repr__(self):
        return (f"IntersectInfo(hit_point={self.hit_point.tolist()}, "
                f"normal={self.normal.tolist()}, time={self.time})")


def make_info(ray, hit_point, normal, material):
    return IntersectInfo(hit_point, normal, material, length(ray.origin - hit_point))


class Sphere:
    """Esfera en la escena."""
    def __init__(self, center, radius, material=None):
        self.center = as_vec3(center)
        self.radius = float(radius)
        self.material = material if material is not None else Material()
        if self.radius <= 0:
            raise ValueError(f"Radio de esfera no válido: {radius}")

    def intersect(self, ray):
        hit, t = hit_sphere(ray.origin, ray.direction, self.center, self.radius)
        if not hit:
            return None
        hit_point = ray.at(t)
        return make_info(ray, hit_point, normalize(hit_point - self.center), self.material)


class Plane:
    """Plano infinito en la escena. La normal no se orienta hacia el rayo."""
    def __init__(self, point, normal, material=None):
        self.point = as_vec3(point)
        normal = as_vec3(normal)
        if length(normal) == 0:
            raise ValueError("La normal del plano no puede ser nula")
        self.normal = normalize(normal)
        self.material = material if material is not None else Material()

    def intersect(self, ray):
        hit, t = hit_plane(ray.origin, ray.direction, self.point, self.normal)
        if not hit:
            return None
        return make_info(ray, ray.at(t), self.normal, self.material)


class Triangle:
    """Triángulo en la escena. La normal sigue el orden de los vértices."""
    def __init__(self, pt1, pt2, pt3, material=None):
        self.pt1 = as_vec3(pt1)
        self.pt2 = as_vec3(pt2)
        self.pt3 = as_vec3(pt3)
        self.material = material if material is not None else Material()

        n = cross(self.pt2 - self.pt1, self.pt3 - self.pt1)
        if length(n) == 0:
            raise ValueError("Triángulo degenerado: vértices colineales")
        self.normal = normalize(n)

    def intersect(self, ray):
        hit, t = hit_triangle(ray.origin, ray.direction, self.pt1, self.pt2, self.pt3, self.normal)
        if not hit:
            return None
        return make_info(ray, ray.at(t), self.normal, self.material)


class Camera:
    """Cámara con perspectiva configurable."""
    def __init__(self, fov_deg=45, aspect_ratio=4/3, lookfrom=(-10, 10, 10), lookat=(0, 0, 0), vup=(0, 1, 0)):
        self.aspect_ratio = aspect_ratio
        self.origin = as_vec3(lookfrom)
        target = as_vec3(lookat)
        if np.array_equal(self.origin, target):
            raise ValueError("lookfrom y lookat no pueden coincidir")

        # Configurar el sistema de coordenadas de la cámara
        theta = math.radians(fov_deg)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        w = normalize(self.origin - target)
        u = normalize(cross(as_vec3(vup), w))
        v = cross(w, u)

        self.horizontal = viewport_width * u
        self.vertical = viewport_height * v
        self.lower_left_corner = self.origin - self.horizontal / 2 - self.vertical / 2 - w

    def get_ray(self, u, v):
        """Rayo primario a través del punto (u, v) del viewport, ambos en [0, 1]."""
        direction = self.lower_left_corner + u * self.horizontal + v * self.vertical - self.origin
        return Ray(self.origin, normalize(direction))


class Scene:
    """
    Contenedor de todas las primitivas de la escena y de su única luz.

    El orden de inserción solo importa para desempatar impactos a la misma
    distancia: gana la primitiva añadida antes.
    """
    def __init__(self, light=None):
        self.objects = []
        self.light = light if light is not None else Light()

    def add(self, primitive):
        """Añadir cualquier primitiva con método intersect(ray)."""
        self.objects.append(primitive)
        return primitive

    def add_sphere(self, sphere):
        return self.add(sphere)

    def add_plane(self, plane):
        return self.add(plane)

    def add_triangle(self, triangle):
        return self.add(triangle)

    def clear(self):
        """Limpiar todos los objetos de la escena."""
        self.objects.clear()

    def __len__(self):
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)

    def find_closest_hit(self, ray):
        """Impacto con menor time entre todas las primitivas, o None."""
        closest = None
        closest_time = math.inf
        for obj in self:
            info = obj.intersect(ray)
            if info is not None and info.time < closest_time:
                closest_time = info.time
                closest = info
        return closest
