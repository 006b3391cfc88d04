import math
from enum import Enum
from .core import (
    SDFNode, Sphere, Box, Cylinder, Torus, Union, Subtract, Intersect,
    Translate, Rotate, Mirror, Color,
)
from .errors import GenerationError
from .loader import merge

PRECISION = 4
DEFAULT_COLOR = (0.2, 0.55, 1.0)
AXIS_THRESHOLD = 0.9
POINT_VAR = "p_in"


class AntiAliasingLevel(Enum):
    """Supersampling grid used by the fragment entry point."""
    OFF = 1
    GRID_2X2 = 2
    GRID_4X4 = 4
    GRID_8X8 = 8

    @property
    def grid_size(self) -> int:
        return self.value

    @property
    def samples(self) -> int:
        return self.value * self.value

    @property
    def label(self) -> str:
        return "off" if self.value == 1 else f"{self.value}x{self.value}"

    @classmethod
    def parse(cls, value) -> 'AntiAliasingLevel':
        """Accepts a member, a grid size (1, 2, 4, 8) or a label ('off', '4x4')."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for level in cls:
                if level.label == value.strip().lower():
                    return level
        elif isinstance(value, int) and not isinstance(value, bool):
            for level in cls:
                if level.value == value:
                    return level
        raise ValueError(f"Unknown anti-aliasing level: {value!r}")


def _fmt(value: float) -> str:
    """Formats a number as a fixed-point GLSL literal."""
    return f"{float(value):.{PRECISION}f}"


def _vec3(v) -> str:
    return f"vec3({_fmt(v[0])}, {_fmt(v[1])}, {_fmt(v[2])})"


def dominant_axis(axis) -> str:
    """Returns the first of 'x', 'y', 'z' whose component dominates, else 'z'."""
    for name, component in zip("xyz", axis):
        if abs(component) > AXIS_THRESHOLD:
            return name
    return "z"


def emit_expression(node: SDFNode, p_var: str = POINT_VAR) -> str:
    """
    Returns a GLSL expression evaluating to an SdfResult (distance, color)
    for the point currently denoted by `p_var`.
    """
    op = node.op
    default = _vec3(DEFAULT_COLOR)

    if isinstance(op, Sphere):
        return f"SdfResult(sd_sphere({p_var}, {_fmt(op.radius)}), {default})"
    if isinstance(op, Box):
        return f"SdfResult(sd_box({p_var}, {_vec3(op.size)}), {default})"
    if isinstance(op, Cylinder):
        return f"SdfResult(sd_cylinder({p_var}, {_fmt(op.radius)}, {_fmt(op.height)}), {default})"
    if isinstance(op, Torus):
        return (f"SdfResult(sd_torus({p_var}, vec2({_fmt(op.major_radius)}, {_fmt(op.minor_radius)})), "
                f"{default})")

    if isinstance(op, Union):
        a, b = emit_expression(op.a, p_var), emit_expression(op.b, p_var)
        if op.smooth > 0.0:
            return f"op_union_smooth({a}, {b}, {_fmt(op.smooth)})"
        return f"op_union({a}, {b})"
    if isinstance(op, Subtract):
        a, b = emit_expression(op.a, p_var), emit_expression(op.b, p_var)
        if op.smooth > 0.0:
            return f"op_subtract_smooth({a}, {b}, {_fmt(op.smooth)})"
        return f"op_subtract({a}, {b})"
    if isinstance(op, Intersect):
        # Intersect has no smooth form; op.smooth is ignored.
        a, b = emit_expression(op.a, p_var), emit_expression(op.b, p_var)
        return f"op_intersect({a}, {b})"

    if isinstance(op, Translate):
        return emit_expression(op.target, f"({p_var} - {_vec3(op.offset)})")
    if isinstance(op, Rotate):
        rad = math.radians(-op.angle_deg)
        return emit_expression(op.target, f"rotate_{dominant_axis(op.axis)}({p_var}, {_fmt(rad)})")
    if isinstance(op, Mirror):
        parts = [f"{p_var}.{c}" for c in "xyz"]
        for i, flag in enumerate(op.axis):
            if flag > AXIS_THRESHOLD:
                parts[i] = f"abs({parts[i]})"
        return emit_expression(op.target, f"vec3({parts[0]}, {parts[1]}, {parts[2]})")

    if isinstance(op, Color):
        return f"set_color({emit_expression(op.target, p_var)}, {_vec3(op.color)})"

    raise TypeError(f"Unknown operation type: {type(op).__name__}")


_ENTRY_SINGLE = """void main() {{
    vec2 pixel_pos = pixel_position();
    vec2 rect_min = uniforms.rect_data.xy;
    vec2 rect_size = uniforms.rect_data.zw;
    float aspect = rect_size.x / rect_size.y;
    vec2 uv = (((pixel_pos - rect_min) / rect_size) * 2.0 - 1.0) * vec2(aspect, -1.0);
    f_color = vec4(render_scene(uv), 1.0);
}}
"""

_ENTRY_GRID = """void main() {{
    vec2 pixel_pos = pixel_position();
    vec2 rect_min = uniforms.rect_data.xy;
    vec2 rect_size = uniforms.rect_data.zw;
    float aspect = rect_size.x / rect_size.y;
    vec3 total_color = vec3(0.0);
    for (int iy = 0; iy < {n}; iy++) {{
        for (int ix = 0; ix < {n}; ix++) {{
            vec2 offset = (vec2(float(ix), float(iy)) + 0.5) / {n}.0 - 0.5;
            vec2 uv = (((pixel_pos + offset - rect_min) / rect_size) * 2.0 - 1.0) * vec2(aspect, -1.0);
            total_color += render_scene(uv);
        }}
    }}
    f_color = vec4(total_color / {samples}.0, 1.0);
}}
"""


def emit_entry_point(aa: AntiAliasingLevel) -> str:
    """
    Returns the fragment entry point. The sample grid is baked into the text
    as literal loop bounds and divisor; there is no per-pixel branching on it.
    """
    n = AntiAliasingLevel.parse(aa).grid_size
    if n <= 1:
        return _ENTRY_SINGLE.format()
    return _ENTRY_GRID.format(n=n, samples=n * n)


def generate(root: SDFNode, aa: AntiAliasingLevel = AntiAliasingLevel.OFF) -> str:
    """
    Generates the map() function and the fragment entry point for a scene.

    Raises:
        GenerationError: When the tree is nested too deeply to emit.
    """
    try:
        map_expr = emit_expression(root, POINT_VAR)
    except RecursionError as e:
        raise GenerationError(f"Generation Error: the scene tree is nested too deeply "
                              f"to compile ({e})") from e
    return (
        f"SdfResult map(vec3 {POINT_VAR}) {{\n"
        f"    return {map_expr};\n"
        f"}}\n"
        f"\n"
        f"{emit_entry_point(aa)}"
    )


class ShaderGenerator:
    """Compiles an SDFNode tree into complete shader source text."""
    def __init__(self, aa: AntiAliasingLevel = AntiAliasingLevel.OFF):
        self.aa = AntiAliasingLevel.parse(aa)

    def generate(self, root: SDFNode) -> str:
        return generate(root, self.aa)

    def compile(self, root: SDFNode) -> str:
        return merge(self.generate(root))


def compile_shader(root: SDFNode, aa: AntiAliasingLevel = AntiAliasingLevel.OFF) -> str:
    """
    Compiles a scene tree into the final shader text.

    Args:
        root (SDFNode): The root of the scene tree.
        aa (AntiAliasingLevel): The supersampling grid for the entry point.
    """
    return ShaderGenerator(aa).compile(root)
