from sdfmodeler import *

def main():
    """
    A toy car built from a box body and four torus wheels.

    Shows colors, rotation and mirroring: one wheel is placed and then
    mirrored across the X and Z axes to produce the other three.
    """
    body = box(1.0, 0.2, 0.5).color(0.8, 0.8, 0.8)
    wheel = torus(0.4, 0.1).rotate_x(90.0).color(0.2, 0.2, 0.2)
    wheels = wheel.translate(1.0, 0.0, 0.6).mirror_x().mirror_z()
    return body | wheels

if __name__ == "__main__":
    # Edit and save this file while the window is open to see changes.
    view(__file__, aa='2x2')
