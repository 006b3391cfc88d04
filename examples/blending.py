from sdfmodeler import *

def main():
    """Smooth union and smooth subtraction side by side."""
    blob = sphere(0.8).color(1.0, 0.2, 0.2).smooth_union(
        sphere(0.6).translate(0.9, 0.3, 0.0).color(0.2, 0.2, 1.0), 0.4)

    carved = box(0.8).smooth_subtract(sphere(1.0), 0.15).color(0.3, 0.8, 0.3)

    return blob.translate(-1.5, 0, 0) | carved.translate(1.5, 0, 0)

if __name__ == "__main__":
    view(__file__, aa='4x4')
