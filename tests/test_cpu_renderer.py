import numpy as np
import pytest

import cpu_renderer

from cpu_renderer import (NO_HIT, REFLECTION_LIMIT, CPURenderer, Payload, cast_ray, is_in_shadow, phong_color,
                          reflection_color, refraction_color)
from geometry import Light, Material, Plane, Ray, Scene, Sphere
from main import create_mirror_box


def unit(*xs):
    v = np.array(xs, dtype=np.float64)
    return v / np.linalg.norm(v)


def test_payload_initial():
    payload = Payload.initial()
    assert payload.num_bounces == 0
    assert payload.refractive_index == 1.0
    np.testing.assert_array_equal(payload.color, [0, 0, 0])


def test_phong_facing_light(floor_scene):
    ray = Ray([0, 10, 0], [0, -1, 0])
    info = floor_scene.find_closest_hit(ray)
    # ambient + diffuse * 1 + specular * 1
    np.testing.assert_allclose(phong_color(ray, info, floor_scene.light), [0.9, 0.6, 0.5])


def test_phong_light_behind_surface(matte):
    plane = Plane([0, 0, 0], [0, 1, 0], matte)
    ray = Ray([0, 10, 0], [0, -1, 0])
    info = plane.intersect(ray)
    light = Light([0, -10, 0], [1, 1, 1])
    np.testing.assert_allclose(phong_color(ray, info, light), matte.ambient)


def test_phong_scales_by_intensity(floor_scene):
    ray = Ray([0, 10, 0], [0, -1, 0])
    info = floor_scene.find_closest_hit(ray)
    light = Light([0, 10, 0], [0.5, 1.0, 0.0])
    np.testing.assert_allclose(phong_color(ray, info, light), [0.45, 0.6, 0.0])


def test_shadow_with_and_without_occluder(floor_scene, occluder):
    point = np.array([0.0, 0.0, 0.0])
    assert not is_in_shadow(point, floor_scene)
    floor_scene.add_sphere(occluder)
    assert is_in_shadow(point, floor_scene)


def test_occluder_beyond_light_does_not_shadow(floor_scene):
    floor_scene.add_sphere(Sphere([0, 20, 0], 1.0))
    assert not is_in_shadow(np.array([0.0, 0.0, 0.0]), floor_scene)


def test_cast_ray_miss(floor_scene):
    time, payload = cast_ray(Ray([0, 1, 0], [0, 1, 0]), floor_scene)
    assert time == NO_HIT
    np.testing.assert_array_equal(payload.color, [0, 0, 0])


def test_cast_ray_matte_surface(floor_scene):
    time, payload = cast_ray(Ray([0, 10, 0], [0, -1, 0]), floor_scene)
    assert time == pytest.approx(10.0)
    np.testing.assert_allclose(payload.color, [0.9, 0.6, 0.5])
    # El rayo reflejado no encuentra nada pero cuenta como rebote
    assert payload.num_bounces == 1


def test_cast_ray_in_shadow_uses_ambient(floor_scene, occluder, matte):
    floor_scene.add_sphere(occluder)
    _, payload = cast_ray(Ray([3, 10, 0], unit(-0.3, -1, 0)), floor_scene)
    np.testing.assert_allclose(payload.color, matte.ambient)


def test_mirror_facing_nothing_is_black():
    scene = Scene(Light([0, 10, 0], [1, 1, 1]))
    scene.add_plane(Plane([0, 0, 0], [0, 1, 0], Material(reflection=1.0)))
    _, payload = cast_ray(Ray([0, 10, 0], [0, -1, 0]), scene)
    np.testing.assert_allclose(payload.color, [0, 0, 0])


def test_reflection_limit_truncates(floor_scene, matte):
    ray = Ray([0, 10, 0], [0, -1, 0])
    info = floor_scene.find_closest_hit(ray)
    surface = np.array([0.2, 0.3, 0.4])
    payload = Payload.initial()._replace(num_bounces=REFLECTION_LIMIT - 1)
    color, payload = reflection_color(ray, info, floor_scene, payload, surface)
    assert color is surface
    assert payload.num_bounces == REFLECTION_LIMIT


def test_mirror_box_terminates():
    scene = create_mirror_box()
    time, payload = cast_ray(Ray([0, 0, 0], unit(0.3, 0.2, -0.9)), scene)
    assert time > 0
    assert payload.num_bounces == REFLECTION_LIMIT
    assert np.all(np.isfinite(payload.color))


@pytest.mark.parametrize("limit", [1, 2, 4])
def test_custom_reflection_limit(limit):
    scene = create_mirror_box()
    _, payload = cast_ray(Ray([0, 0, 0], [1, 0, 0]), scene, reflection_limit=limit)
    assert payload.num_bounces == limit


def test_cast_ray_is_idempotent():
    scene = create_mirror_box()
    ray = Ray([0.5, 0.5, 0.5], unit(0.2, -0.5, -0.8))
    first_time, first = cast_ray(ray, scene, Payload.initial())
    second_time, second = cast_ray(ray, scene, Payload.initial())
    assert first_time == second_time
    assert np.array_equal(first.color, second.color)
    assert first.num_bounces == second.num_bounces


def glass_scene(ambient_only, refractive_index):
    scene = Scene(Light([0, 10, 10], [1, 1, 1]))
    glass = ambient_only([0.9, 0.1, 0.1], refraction=1.0, refractive_index=refractive_index)
    scene.add_sphere(Sphere([0, 0, 0], 1.0, glass))
    scene.add_plane(Plane([0, 0, -5], [0, 0, 1], ambient_only([0.2, 0.4, 0.6])))
    return scene


def test_refraction_passes_through(ambient_only):
    scene = glass_scene(ambient_only, 1.5)
    time, payload = cast_ray(Ray([0, 0, 10], [0, 0, -1]), scene)
    assert time == pytest.approx(9.0)
    np.testing.assert_allclose(payload.color, [0.2, 0.4, 0.6])
    assert payload.refractive_index == 1.5


def test_refraction_blocked_inside_medium(ambient_only):
    scene = glass_scene(ambient_only, 1.5)
    start = Payload.initial()._replace(refractive_index=1.5)
    _, payload = cast_ray(Ray([0, 0, 10], [0, 0, -1]), scene, start)
    np.testing.assert_allclose(payload.color, [0.9, 0.1, 0.1])


def test_total_internal_reflection(ambient_only):
    scene = glass_scene(ambient_only, 0.5)
    _, payload = cast_ray(Ray([0, 0.99, 10], [0, 0, -1]), scene)
    np.testing.assert_allclose(payload.color, [0.9, 0.1, 0.1])
    # El cambio de medio se registra aunque no haya rayo refractado
    assert payload.refractive_index == 0.5


def test_refraction_skipped_for_opaque(floor_scene):
    ray = Ray([0, 10, 0], [0, -1, 0])
    info = floor_scene.find_closest_hit(ray)
    base = np.array([0.1, 0.2, 0.3])
    color, payload = refraction_color(ray, info, floor_scene, Payload.initial(), base)
    assert color is base
    assert payload.refractive_index == 1.0


def test_ray_from_sphere_surface_reaches_what_is_behind(ambient_only):
    scene = Scene(Light([0, 10, 10], [1, 1, 1]))
    scene.add_sphere(Sphere([0, 0, 0], 1.0))
    scene.add_plane(Plane([0, 0, -5], [0, 0, 1], ambient_only([0.2, 0.4, 0.6])))
    ray = Ray([0, 0, 1], [0, 0, -1])

    time, _ = cast_ray(ray, scene)
    assert time == pytest.approx(6.0)
    np.testing.assert_allclose(CPURenderer().render_pixel(scene, ray), [0.2, 0.4, 0.6])


SECONDARY = np.array([0.2, 0.4, 0.6])


@pytest.fixture
def secondary_rays(monkeypatch):
    """Sustituye la recursión: guarda los rayos y devuelve SECONDARY como color."""
    rays = []

    def fake_cast_ray(ray, scene, payload, epsilon, reflection_limit):
        rays.append(ray)
        return 1.0, payload._replace(color=SECONDARY.copy())

    monkeypatch.setattr(cpu_renderer, "cast_ray", fake_cast_ray)
    return rays


def test_reflection_blend_oblique(secondary_rays):
    scene = Scene(Light([0, 10, 0], [1, 1, 1]))
    scene.add_plane(Plane([0, 0, 0], [0, 1, 0], Material(reflection=0.5)))
    ray = Ray([-1, 1, 0], unit(1, -1, 0))
    info = scene.find_closest_hit(ray)
    surface = np.array([0.8, 0.6, 0.4])

    color, payload = reflection_color(ray, info, scene, Payload.initial(), surface)

    np.testing.assert_allclose(color, [0.5, 0.5, 0.5])
    assert payload.num_bounces == 1
    (reflected,) = secondary_rays
    np.testing.assert_allclose(reflected.direction, unit(1, 1, 0))
    np.testing.assert_allclose(reflected.origin, 0.01 * unit(1, 1, 0), atol=1e-12)


def test_refraction_oblique_direction_and_blend(secondary_rays):
    scene = Scene(Light([0, 10, 10], [1, 1, 1]))
    sphere = scene.add_sphere(Sphere([0, 0, 0], 1.0, Material(refraction=0.5, refractive_index=1.5)))
    ray = Ray([-3.5, 0, 10], unit(0.3, 0, -1))
    info = sphere.intersect(ray)
    base = np.array([0.8, 0.6, 0.4])

    color, payload = refraction_color(ray, info, scene, Payload.initial(), base)

    np.testing.assert_allclose(color, [0.5, 0.5, 0.5])
    assert payload.refractive_index == 1.5

    n, d = info.normal, ray.direction
    eta = -1.0 / 1.5
    cos_i = np.dot(n, -d)
    k = 1.0 - eta ** 2 * (1.0 - cos_i ** 2)
    expected = (eta * cos_i - np.sqrt(k)) * n - eta * (-d)

    (refracted,) = secondary_rays
    np.testing.assert_allclose(refracted.direction, expected)
    np.testing.assert_allclose(refracted.origin, info.hit_point + 0.01 * expected)
    # Componente normal hacia dentro; la tangencial se invierte por el signo de eta
    assert np.dot(refracted.direction, n) == pytest.approx(-np.sqrt(k))
    tangent_in = d - np.dot(d, n) * n
    tangent_out = refracted.direction - np.dot(refracted.direction, n) * n
    assert np.dot(tangent_in, tangent_out) < 0
    np.testing.assert_allclose(tangent_out, eta * tangent_in)
