"""
Coordinate Transforms

Pure functions shared by every mode:
- grid index <-> canvas pixel
- polar <-> Cartesian
- 4D rotation -> 3D perspective -> 2D perspective

4D rotation order is fixed: XW first, then YW, then ZW. Each plane
rotation mixes one axis with w:

    a' = a cos(theta) - w sin(theta)
    w' = a sin(theta) + w cos(theta)

Projection then divides (x, y, z) by (depth - w) / depth to get a 3D
point, divides (x, y) by (depth - z) / depth, and multiplies by scale.
"""

import math

from .errors import ConfigurationError


# Snap tolerance when recovering a grid index from a cell corner
_INDEX_EPS = 1e-9


def grid_to_canvas(i, j, cell_size, origin=(0.0, 0.0)):
    """Top-left pixel of grid cell (column i, row j)."""
    if cell_size <= 0:
        raise ConfigurationError(f"cell_size must be > 0, got {cell_size}")
    ox, oy = origin
    return (ox + i * cell_size, oy + j * cell_size)


def _to_index(offset, cell_size):
    q = offset / cell_size
    r = round(q)
    if abs(q - r) < _INDEX_EPS:
        return int(r)
    return int(math.floor(q))


def canvas_to_grid(x, y, cell_size, origin=(0.0, 0.0)):
    """Grid cell (column, row) containing canvas point (x, y)."""
    if cell_size <= 0:
        raise ConfigurationError(f"cell_size must be > 0, got {cell_size}")
    ox, oy = origin
    return (_to_index(x - ox, cell_size), _to_index(y - oy, cell_size))


def polar_to_cartesian(r, theta):
    return (r * math.cos(theta), r * math.sin(theta))


def cartesian_to_polar(x, y):
    """(r, theta) with theta in (-pi, pi]; None at the origin."""
    if x == 0 and y == 0:
        return None
    return (math.hypot(x, y), math.atan2(y, x))


def rotate_4d(point, rot_xw, rot_yw, rot_zw):
    """Rotate a 4D point in the XW, YW and ZW planes, in that order."""
    x, y, z, w = point

    c, s = math.cos(rot_xw), math.sin(rot_xw)
    x, w = x * c - w * s, x * s + w * c

    c, s = math.cos(rot_yw), math.sin(rot_yw)
    y, w = y * c - w * s, y * s + w * c

    c, s = math.cos(rot_zw), math.sin(rot_zw)
    z, w = z * c - w * s, z * s + w * c

    return (x, y, z, w)


def project_4d_to_3d(point, depth):
    x, y, z, w = point
    denom = depth - w
    if denom <= 0:
        raise ConfigurationError(f"4D point w={w:.3f} at or behind camera depth {depth}")
    f = depth / denom
    return (x * f, y * f, z * f)


def project_3d_to_2d(point, depth, scale):
    x, y, z = point
    denom = depth - z
    if denom <= 0:
        raise ConfigurationError(f"3D point z={z:.3f} at or behind camera depth {depth}")
    f = depth / denom
    return (x * f * scale, y * f * scale)


def project_4d(point, rot_xw, rot_yw, rot_zw, depth, scale):
    """Rotate (XW, YW, ZW) then perspective-project 4D -> 3D -> 2D.

    Returns canvas-relative (x, y); add the canvas center to place it.
    """
    rotated = rotate_4d(point, rot_xw, rot_yw, rot_zw)
    return project_3d_to_2d(project_4d_to_3d(rotated, depth), depth, scale)
