import numpy as np
import pytest
from sdfmodeler import sphere, box, torus, AntiAliasingLevel, compile_shader
from sdfmodeler.render import Camera, RenderResources, pack_uniforms
from tests.conftest import requires_glsl_validator

SCENES = {
    "sphere": sphere(1.0),
    "blend": box(1.0).smooth_union(sphere(0.6).translate(1, 0, 0), 0.2),
    "carve": box(1.0).smooth_subtract(sphere(1.2), 0.1).intersect(sphere(1.5)),
    "wheels": torus(0.4, 0.1).rotate_x(90).translate(1, 0, 0.6).mirror(x=True, z=True).color(0.2, 0.2, 0.2),
}

@requires_glsl_validator
@pytest.mark.parametrize("level", list(AntiAliasingLevel))
@pytest.mark.parametrize("name", sorted(SCENES))
def test_generated_shader_validates(validate_glsl, name, level):
    validate_glsl(compile_shader(SCENES[name], level))

@pytest.mark.parametrize("level", [AntiAliasingLevel.OFF, AntiAliasingLevel.GRID_2X2])
def test_headless_render_hits_scene(headless_env, level):
    moderngl = pytest.importorskip("moderngl")
    ctx = headless_env
    size = (64, 64)
    shader = compile_shader(sphere(1.0).color(1.0, 0.0, 0.0), level)
    resources = RenderResources.create(ctx, shader)
    fbo = ctx.simple_framebuffer(size)
    try:
        fbo.use()
        fbo.clear(0.0, 0.0, 0.0, 1.0)
        uniforms = pack_uniforms((0.0, 0.0) + size, size, 0.0, Camera())
        resources.draw(uniforms, moderngl.TRIANGLE_STRIP)
        image = np.frombuffer(fbo.read(components=3), dtype=np.uint8).reshape(size[1], size[0], 3)
    finally:
        fbo.release()
        resources.release()

    centre = image[size[1] // 2, size[0] // 2].astype(int)
    corner = image[0, 0].astype(int)
    assert centre[0] > centre[2]
    assert corner[2] > corner[0]
