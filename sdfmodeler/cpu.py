import math
import numpy as np
from .core import (
    Sphere, Box, Cylinder, Torus, Union, Subtract, Intersect,
    Translate, Rotate, Mirror, Color,
)
from .codegen import DEFAULT_COLOR, AXIS_THRESHOLD, dominant_axis, _fmt

# NumPy mirror of the GLSL emitted by codegen and the template helpers.
# Every evaluator maps points (N, 3) to (distances (N,), colors (N, 3)).


def _lit(value) -> float:
    """Rounds a value the way it is printed into the shader."""
    return float(_fmt(value))


def _lit3(v) -> np.ndarray:
    return np.array([_lit(c) for c in v])


def _constant_color(rgb):
    rgb = _lit3(rgb)
    return lambda n: np.tile(rgb, (n, 1))


# --- Primitives ---

def _sphere(op):
    r = _lit(op.radius)
    return lambda p: np.linalg.norm(p, axis=-1) - r

def _box(op):
    b = _lit3(op.size)
    def func(p):
        q = np.abs(p) - b
        return np.linalg.norm(np.maximum(q, 0.0), axis=-1) + np.minimum(np.max(q, axis=-1), 0.0)
    return func

def _cylinder(op):
    r, h = _lit(op.radius), _lit(op.height)
    def func(p):
        d = np.abs(np.stack([np.linalg.norm(p[:, [0, 2]], axis=-1), p[:, 1]], axis=-1)) - np.array([r, h])
        return np.minimum(np.maximum(d[:, 0], d[:, 1]), 0.0) + np.linalg.norm(np.maximum(d, 0.0), axis=-1)
    return func

def _torus(op):
    major, minor = _lit(op.major_radius), _lit(op.minor_radius)
    def func(p):
        q = np.stack([np.linalg.norm(p[:, [0, 2]], axis=-1) - major, p[:, 1]], axis=-1)
        return np.linalg.norm(q, axis=-1) - minor
    return func

_PRIMITIVES = {Sphere: _sphere, Box: _box, Cylinder: _cylinder, Torus: _torus}


# --- Combinators ---

def _union(da, ca, db, cb):
    take_b = db < da
    return np.where(take_b, db, da), np.where(take_b[:, None], cb, ca)

def _subtract(da, ca, db, cb):
    return np.maximum(da, -db), ca

def _intersect(da, ca, db, cb):
    take_b = db > da
    return np.where(take_b, db, da), np.where(take_b[:, None], cb, ca)

def _union_smooth(k):
    def blend(da, ca, db, cb):
        h = np.clip(0.5 + 0.5 * (db - da) / k, 0.0, 1.0)
        d = db * (1.0 - h) + da * h - k * h * (1.0 - h)
        return d, cb * (1.0 - h)[:, None] + ca * h[:, None]
    return blend

def _subtract_smooth(k):
    def blend(da, ca, db, cb):
        h = np.clip(0.5 - 0.5 * (db + da) / k, 0.0, 1.0)
        d = da * (1.0 - h) + (-db) * h + k * h * (1.0 - h)
        return d, ca * (1.0 - h)[:, None] + cb * h[:, None]
    return blend


# --- Point rewrites ---

def _rotation(axis_name, angle):
    c, s = math.cos(angle), math.sin(angle)
    def rotate(p):
        x, y, z = p[:, 0], p[:, 1], p[:, 2]
        if axis_name == 'x':
            return np.stack([x, c * y - s * z, s * y + c * z], axis=-1)
        if axis_name == 'y':
            return np.stack([c * x + s * z, y, -s * x + c * z], axis=-1)
        return np.stack([c * x - s * y, s * x + c * y, z], axis=-1)
    return rotate

def _point_rewrite(op):
    if isinstance(op, Translate):
        offset = _lit3(op.offset)
        return lambda p: p - offset
    if isinstance(op, Rotate):
        return _rotation(dominant_axis(op.axis), _lit(math.radians(-op.angle_deg)))
    mask = np.array([flag > AXIS_THRESHOLD for flag in op.axis])
    def fold(p):
        q = p.copy()
        q[:, mask] = np.abs(q[:, mask])
        return q
    return fold


def _build(node):
    op = node.op

    if type(op) in _PRIMITIVES:
        dist = _PRIMITIVES[type(op)](op)
        color = _constant_color(DEFAULT_COLOR)
        return lambda p: (dist(p), color(len(p)))

    if isinstance(op, (Union, Subtract, Intersect)):
        fa, fb = _build(op.a), _build(op.b)
        k = _lit(op.smooth)
        if isinstance(op, Union):
            combine = _union_smooth(k) if op.smooth > 0.0 else _union
        elif isinstance(op, Subtract):
            combine = _subtract_smooth(k) if op.smooth > 0.0 else _subtract
        else:
            combine = _intersect
        def _combined(p):
            da, ca = fa(p)
            db, cb = fb(p)
            return combine(da, ca, db, cb)
        return _combined

    if isinstance(op, (Translate, Rotate, Mirror)):
        rewrite, child = _point_rewrite(op), _build(op.target)
        return lambda p: child(rewrite(p))

    if isinstance(op, Color):
        child, color = _build(op.target), _constant_color(op.color)
        def _painted(p):
            d, _ = child(p)
            return d, color(len(p))
        return _painted

    raise TypeError(f"Unknown operation type: {type(op).__name__}")


def to_callable(node):
    """
    Returns a Python function that takes a NumPy array of points (N, 3) and
    returns (distances (N,), colors (N, 3)), matching the generated shader.
    """
    evaluator = _build(node)
    def _evaluate(points):
        p = np.atleast_2d(np.asarray(points, dtype=float))
        if p.shape[-1] != 3:
            raise ValueError(f"Points must have shape (N, 3), got {p.shape}")
        return evaluator(p)
    return _evaluate


def distance(node, points) -> np.ndarray:
    """Convenience wrapper returning only the distances."""
    return to_callable(node)(points)[0]
