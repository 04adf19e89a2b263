#!/usr/bin/env python3
"""
rayhit - Ray casting against triangle meshes

Main entry point: load an OBJ mesh and cast a single ray into it.
"""

import argparse
import itertools
import logging
import sys

from rayhit.vec3 import Vec3, Point3
from rayhit.ray import Ray
from rayhit.mesh import load_obj

LOGGER = logging.getLogger("rayhit.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='rayhit - cast a ray into a triangle mesh',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py model.obj --origin 0 0 -5 --direction 0 0 1
  python main.py model.obj --origin 0 0 -5 --direction 0 0 1 --all
  python main.py model.obj --info
        '''
    )

    parser.add_argument('mesh', type=str, help='Path to a Wavefront OBJ file')
    parser.add_argument('--origin', type=float, nargs=3, default=[0.0, 0.0, 0.0],
                        metavar=('X', 'Y', 'Z'), help='Ray origin (default: 0 0 0)')
    parser.add_argument('--direction', type=float, nargs=3, default=[0.0, 0.0, 1.0],
                        metavar=('X', 'Y', 'Z'), help='Ray direction (default: 0 0 1)')
    parser.add_argument('--normalize', action='store_true',
                        help='Normalize the direction so t is a world-space distance')
    parser.add_argument('--all', action='store_true', help='Print every hit, not just the first')
    parser.add_argument('--scale', type=float, default=1.0, help='Scale factor for the mesh')
    parser.add_argument('--center', action='store_true', help='Center the mesh at the origin')
    parser.add_argument('--info', action='store_true', help='Show mesh statistics and exit')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None) -> int:
    """Main entry point.

    Returns:
        0 if the ray hits the mesh (or --info), 1 on a miss, 2 if the mesh
        cannot be loaded
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s"
    )

    try:
        mesh = load_obj(args.mesh, scale=args.scale, center=args.center)
    except (FileNotFoundError, ValueError) as exc:
        LOGGER.error("Could not load mesh: %s", exc)
        return 2

    if args.info:
        stats = mesh.stats()
        print(f"Mesh: {args.mesh}")
        print(f"  Triangles: {stats['triangle_count']}")
        print(f"  Vertices: {stats['vertex_count']}")
        print(f"  Bounds min: {stats['bounds_min']}")
        print(f"  Bounds max: {stats['bounds_max']}")
        print(f"  Size: {stats['size']}")
        return 0

    ray = Ray(Point3(*args.origin), Vec3(*args.direction))
    if args.normalize:
        ray = ray.normalized()
    LOGGER.debug("Casting %s against %r", ray, mesh)

    hits = ray.intersections(mesh.indices, mesh.vertices)
    if not args.all:
        hits = itertools.islice(hits, 1)

    found = False
    for index, t in hits:
        found = True
        print(f"triangle {index} at t={t:g}")

    if not found:
        print("no intersection")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
