from sdfmodeler import *

# A row of every primitive, evaluated as the script's final expression.
shapes = [
    sphere(0.5),
    box(0.4, 0.3, 0.4),
    cylinder(0.3, 0.5),
    torus(0.4, 0.12).rotate_x(90),
]

scene = shapes[0]
for i, shape in enumerate(shapes[1:], start=1):
    scene = scene | shape.translate(i * 1.4, 0, 0)

scene.translate(-2.1, 0, 0)
