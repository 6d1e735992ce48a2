"""
main.py - Script principal para ejecutar el Ray Tracer
"""

import argparse
import logging
import time

import matplotlib.pyplot as plt

from cpu_renderer import EPSILON, REFLECTION_LIMIT, CPURenderer
from geometry import Camera, Light, Material, Plane, Scene, Sphere, Triangle
from raytracer import RayTracer
from tone_map import to_rgb8


def create_demo_scene():
    """Escena de demostración: diez esferas, un triángulo espejo y cuatro paredes."""
    scene = Scene(Light([-150, 300, 10], [1, 1, 1]))

    chrome = Material([0.01, 0.01, 0.01], [0.9, 0.9, 0.9], [0.8, 0.8, 1.0], 20, 0.0, 0.7, 1.4)
    gloss_green = Material([0.01, 0.05, 0.02], [0.4, 0.6, 0.3], [0.5, 0.5, 0.5], 30, 0.1, 0, 1.0)
    gloss_red = Material([0.05, 0.03, 0.03], [1.0, 0.3, 0.3], [0.7, 0.7, 0.7], 10, 0.2, 0, 0)
    mirror_pink = Material([0.05, 0.03, 0.03], [1.0, 0.5, 0.7], [0.7, 0.7, 0.7], 10, 0.4, 0, 0)
    light_blue = Material([0.01, 0.05, 0.02], [0.3, 0.3, 1.0], [0.2, 0.2, 0.2], 60, 0.3, 0, 1.0)
    white_wall = Material([0.3, 0.3, 0.3], [0.7, 0.7, 0.7], [0.7, 0.7, 0.7], 20, 0.5, 0, 1.0)

    extras = [
        Material([0.03, 0.03, 0.03], [0.9, 0.6, 0.5], [0.3, 0.3, 0.3], 20, 0.4, 0.0, 1.0),
        Material([0.03, 0.03, 0.03], [0.9, 0.4, 0.3], [0.3, 0.3, 0.3], 10, 0.1, 0.0, 1.0),
        Material([0.03, 0.03, 0.03], [0.7, 0.7, 0.5], [0.3, 0.3, 0.3], 30, 0.0, 0.0, 1.0),
        Material([0.03, 0.03, 0.03], [0.8, 0.9, 0.6], [0.3, 0.3, 0.3], 50, 0.5, 0.0, 1.0),
        Material([0.03, 0.03, 0.03], [0.4, 0.6, 0.2], [0.3, 0.3, 0.3], 90, 0.5, 0.0, 1.0),
        Material([0.03, 0.03, 0.03], [0.8, 0.5, 0.3], [0.3, 0.3, 0.3], 70, 0.3, 0.1, 1.0),
    ]

    # Esferas
    scene.add_sphere(Sphere([150, -170, -150], 30.0, chrome))
    scene.add_sphere(Sphere([140, -180, -90], 20.0, gloss_red))
    scene.add_sphere(Sphere([190, -178, -110], 22.0, gloss_green))
    scene.add_sphere(Sphere([220, -181, -160], 19.0, light_blue))
    scene.add_sphere(Sphere([210, -182, -220], 18.0, extras[0]))
    scene.add_sphere(Sphere([170, -182, -200], 18.0, extras[1]))
    scene.add_sphere(Sphere([140, -181, -230], 19.0, extras[2]))
    scene.add_sphere(Sphere([100, -178, -200], 22.0, extras[3]))
    scene.add_sphere(Sphere([50, -181, -150], 19.0, extras[4]))
    scene.add_sphere(Sphere([90, -181, -100], 19.0, extras[5]))

    scene.add_triangle(Triangle([80, -200, -180], [120, -200, -120], [110, -140, -150], mirror_pink))

    # Paredes, suelo y techo
    scene.add_plane(Plane([0, 0, -250], [0, 0, 1], white_wall))
    scene.add_plane(Plane([250, 0, 0], [-1, 0, 0], white_wall))
    scene.add_plane(Plane([0, -200, 0], [0, 1, 0], white_wall))
    scene.add_plane(Plane([0, 500, 0], [0, -1, 0], white_wall))

    return scene


def create_mirror_box(size=5.0):
    """Caja cerrada con todas las caras espejo y la luz dentro."""
    scene = Scene(Light([0, size * 0.8, 0], [1, 1, 1]))
    mirror = Material([0.05, 0.05, 0.05], [0.5, 0.5, 0.5], [0.5, 0.5, 0.5], 20, 1.0, 0, 1.0)

    for axis in range(3):
        for sign in (-1, 1):
            point = [0.0, 0.0, 0.0]
            normal = [0.0, 0.0, 0.0]
            point[axis] = sign * size
            normal[axis] = -sign  # Normales hacia el interior
            scene.add_plane(Plane(point, normal, mirror))

    scene.add_sphere(Sphere([0, -size * 0.6, 0], size * 0.3,
                            Material([0.05, 0.02, 0.02], [0.9, 0.2, 0.2], [0.6, 0.6, 0.6], 30, 0.2)))
    return scene


def display_image(image, title="Ray Tracing", gamma=None):
    """Mostrar imagen renderizada."""
    plt.figure(figsize=(12, 8))
    plt.imshow(to_rgb8(image, gamma))
    plt.axis('off')
    plt.title(title, fontsize=16, pad=20)
    plt.tight_layout()
    plt.show()


def build_parser():
    parser = argparse.ArgumentParser(description='Ray Tracer recursivo (Phong, sombras, reflexión y refracción)')
    parser.add_argument('--mode', choices=['demo', 'mirror'],
                        default='demo', help='Escena a renderizar')
    parser.add_argument('--width', type=int, default=640, help='Ancho de la imagen')
    parser.add_argument('--height', type=int, default=480, help='Alto de la imagen')
    parser.add_argument('--reflection-limit', type=int, default=REFLECTION_LIMIT,
                        help='Rebotes de reflexión máximos por píxel')
    parser.add_argument('--epsilon', type=float, default=EPSILON,
                        help='Desplazamiento de los rayos secundarios')
    parser.add_argument('--gamma', type=float, default=None, help='Corrección gamma de salida')
    parser.add_argument('--save', type=str, help='Ruta para guardar la imagen (ej: imagen.png)')
    parser.add_argument('--no-display', action='store_true', help='No abrir la ventana de matplotlib')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='Más mensajes de log')
    return parser


def main(argv=None):
    """Función principal."""
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    print("Ray Tracer recursivo")
    print("="*40)

    renderer = CPURenderer(reflection_limit=args.reflection_limit, epsilon=args.epsilon)
    tracer = RayTracer(width=args.width, height=args.height, renderer=renderer)

    # Seleccionar escena
    if args.mode == 'demo':
        scene = create_demo_scene()
        title = f"Escena Demo - {args.width}x{args.height}"
    else:
        scene = create_mirror_box()
        tracer.set_camera(Camera(
            fov_deg=60,
            aspect_ratio=args.width/args.height,
            lookfrom=(-3, 2, 4),
            lookat=(0, -1, 0),
            vup=(0, 1, 0)
        ))
        title = f"Caja de espejos - {args.width}x{args.height}"

    # Renderizar
    print(f"\nRenderizando {args.mode}...")
    start_time = time.time()
    image = tracer.render(scene)
    end_time = time.time()

    print(f"Completado en {end_time - start_time:.2f} segundos")

    if args.save:
        tracer.save(image, args.save, gamma=args.gamma)
        print(f"Imagen guardada en: {args.save}")

    if not args.no_display:
        display_image(image, title, gamma=args.gamma)

    return image


if __name__ == "__main__":
    main()
