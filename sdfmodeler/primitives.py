from numbers import Real
from .core import SDFNode, Sphere, Box, Cylinder, Torus, _vec3, _finite


def sphere(radius: float = 1.0) -> SDFNode:
    """
    Creates a sphere centered at the origin.

    Args:
        radius (float, optional): The radius of the sphere. Defaults to 1.0.
    """
    return SDFNode(Sphere(_finite(radius, 'radius')))


def box(x=1.0, y=None, z=None) -> SDFNode:
    """
    Creates an axis-aligned box centered at the origin.

    Args:
        x (float or tuple): The half extent along x, or all three half extents.
                            A single number with no y/z creates a cube.
        y (float, optional): The half extent along y.
        z (float, optional): The half extent along z.
    """
    if y is None and z is None:
        size = (x, x, x) if isinstance(x, Real) else x
    else:
        size = (x, y, z)
    return SDFNode(Box(_vec3(size, 'size')))


def cylinder(radius: float = 0.5, height: float = 1.0) -> SDFNode:
    """
    Creates a capped cylinder along the Y axis, centered at the origin.

    Args:
        radius (float): The radius of the cylinder.
        height (float): The half height of the cylinder.
    """
    return SDFNode(Cylinder(_finite(radius, 'radius'), _finite(height, 'height')))


def torus(major_radius: float = 1.0, minor_radius: float = 0.25) -> SDFNode:
    """
    Creates a torus centered at the origin, lying in the XZ plane.

    Args:
        major_radius (float): Distance from the origin to the center of the tube.
        minor_radius (float): Radius of the tube itself.
    """
    return SDFNode(Torus(_finite(major_radius, 'major_radius'),
                         _finite(minor_radius, 'minor_radius')))
