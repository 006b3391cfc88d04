from sdfmodeler import *

def main():
    """
    Demonstrates the boolean operators.

    A box is intersected with a sphere (`&`), then three cylinders
    along each axis are subtracted from the result (`-`).
    """
    f = box(1.0) & sphere(1.3)
    c = cylinder(0.5, 1.5)
    f -= c | c.rotate_x(90) | c.rotate_z(90)
    return f.color(0.9, 0.6, 0.2)

if __name__ == "__main__":
    view(__file__)
