import math
from typing import NamedTuple, Tuple, Union as _TypeUnion

Vec3 = Tuple[float, float, float]

X, Y, Z = (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)


def _finite(value, name: str = 'value') -> float:
    """Converts a number to float, rejecting NaN and infinities."""
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")
    return value


def _vec3(value, name: str = 'value') -> Vec3:
    """Normalises a 3-sequence of finite numbers into a tuple of floats."""
    try:
        x, y, z = value
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a sequence of three numbers, got {value!r}")
    return (_finite(x, name), _finite(y, name), _finite(z, name))


def _smooth(k) -> float:
    k = _finite(k, 'Smoothing factor')
    if k < 0.0:
        raise ValueError(f"Smoothing factor cannot be negative, got {k}")
    return k


# --- Operations ---
# A closed set of immutable variants. Children are owned SDFNode values.

class Sphere(NamedTuple):
    radius: float


class Box(NamedTuple):
    size: Vec3  # half extents


class Cylinder(NamedTuple):
    radius: float
    height: float


class Torus(NamedTuple):
    major_radius: float
    minor_radius: float


class Union(NamedTuple):
    a: 'SDFNode'
    b: 'SDFNode'
    smooth: float = 0.0


class Subtract(NamedTuple):
    a: 'SDFNode'
    b: 'SDFNode'
    smooth: float = 0.0


class Intersect(NamedTuple):
    a: 'SDFNode'
    b: 'SDFNode'
    smooth: float = 0.0


class Translate(NamedTuple):
    target: 'SDFNode'
    offset: Vec3


class Rotate(NamedTuple):
    target: 'SDFNode'
    axis: Vec3
    angle_deg: float


class Mirror(NamedTuple):
    target: 'SDFNode'
    axis: Vec3  # per-component fold mask


class Color(NamedTuple):
    target: 'SDFNode'
    color: Vec3


PRIMITIVES = (Sphere, Box, Cylinder, Torus)
COMBINATORS = (Union, Subtract, Intersect)
TRANSFORMS = (Translate, Rotate, Mirror)
OPERATIONS = PRIMITIVES + COMBINATORS + TRANSFORMS + (Color,)

Operation = _TypeUnion[Sphere, Box, Cylinder, Torus,
                       Union, Subtract, Intersect,
                       Translate, Rotate, Mirror, Color]


class SDFNode(NamedTuple):
    """
    An immutable node of the scene tree, wrapping exactly one operation.

    Every builder method returns a new node that owns the receiver as a
    child. The receiver itself is never modified, so a variable holding a
    node keeps denoting the same tree until it is reassigned.
    """
    op: Operation

    def children(self) -> tuple:
        """Returns the child nodes owned by this node's operation."""
        op = self.op
        if isinstance(op, COMBINATORS):
            return (op.a, op.b)
        if isinstance(op, TRANSFORMS + (Color,)):
            return (op.target,)
        return ()

    def walk(self):
        """Yields every node of the tree in depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def depth(self) -> int:
        deepest, stack = 0, [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children())
        return deepest

    # --- Combinators ---

    def union(self, other: 'SDFNode') -> 'SDFNode':
        return SDFNode(Union(self, _node(other), 0.0))

    def smooth_union(self, other: 'SDFNode', k: float) -> 'SDFNode':
        return SDFNode(Union(self, _node(other), _smooth(k)))

    def subtract(self, other: 'SDFNode') -> 'SDFNode':
        return SDFNode(Subtract(self, _node(other), 0.0))

    def smooth_subtract(self, other: 'SDFNode', k: float) -> 'SDFNode':
        return SDFNode(Subtract(self, _node(other), _smooth(k)))

    def intersect(self, other: 'SDFNode', k: float = 0.0) -> 'SDFNode':
        return SDFNode(Intersect(self, _node(other), _smooth(k)))

    add = union
    sub = subtract

    def __or__(self, other): return self.union(other)
    def __and__(self, other): return self.intersect(other)
    def __sub__(self, other): return self.subtract(other)

    # --- Transforms ---

    def translate(self, x, y=None, z=None) -> 'SDFNode':
        """
        Moves the subtree by an offset in world space.

        Args:
            x (float or tuple): The x offset, or a full (x, y, z) offset.
            y (float, optional): The y offset.
            z (float, optional): The z offset.
        """
        offset = (x, y, z) if y is not None or z is not None else x
        return SDFNode(Translate(self, _vec3(offset, 'offset')))

    move = translate

    def __add__(self, offset): return self.translate(offset)

    def rotate(self, axis, deg: float) -> 'SDFNode':
        """
        Rotates the subtree about a coordinate axis through the origin.

        Args:
            axis (tuple or str): One of the coordinate unit vectors, or 'x', 'y', 'z'.
            deg (float): The rotation angle in degrees.
        """
        if isinstance(axis, str):
            axes = {'x': X, 'y': Y, 'z': Z}
            if axis.lower() not in axes:
                raise ValueError(f"Unknown rotation axis '{axis}'")
            axis = axes[axis.lower()]
        return SDFNode(Rotate(self, _vec3(axis, 'axis'), _finite(deg, 'angle')))

    def rotate_x(self, deg: float) -> 'SDFNode': return self.rotate(X, deg)
    def rotate_y(self, deg: float) -> 'SDFNode': return self.rotate(Y, deg)
    def rotate_z(self, deg: float) -> 'SDFNode': return self.rotate(Z, deg)

    def mirror(self, x: bool = False, y: bool = False, z: bool = False) -> 'SDFNode':
        """Folds the subtree across every flagged coordinate plane."""
        mask = tuple(1.0 if flag else 0.0 for flag in (x, y, z))
        return SDFNode(Mirror(self, mask))

    def mirror_x(self) -> 'SDFNode': return self.mirror(x=True)
    def mirror_y(self) -> 'SDFNode': return self.mirror(y=True)
    def mirror_z(self) -> 'SDFNode': return self.mirror(z=True)

    # --- Appearance ---

    def color(self, r, g=None, b=None) -> 'SDFNode':
        """Paints the subtree, overriding any color set beneath it."""
        rgb = (r, g, b) if g is not None or b is not None else r
        return SDFNode(Color(self, _vec3(rgb, 'color')))

    # Operations are plain tuples, so Union(a, b) would equal Subtract(a, b)
    # without the type check.
    def __eq__(self, other):
        if not isinstance(other, SDFNode):
            return NotImplemented
        return type(self.op) is type(other.op) and tuple.__eq__(self.op, other.op)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash((type(self.op).__name__, self.op))

    def __repr__(self):
        return f"SDFNode({self.op!r})"


def _node(value) -> SDFNode:
    if not isinstance(value, SDFNode):
        raise TypeError(f"Expected an SDFNode, got {type(value).__name__}")
    return value
