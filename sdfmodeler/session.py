from typing import NamedTuple, Optional
from .codegen import AntiAliasingLevel, compile_shader
from .errors import ScriptError, GenerationError
from .script import evaluate_script

DEFAULT_SCENE = """\
# Colors and mirroring demo
body = box(1.0, 0.2, 0.5).color(0.8, 0.8, 0.8)
wheel = torus(0.4, 0.1).rotate_x(90.0).color(0.2, 0.2, 0.2)

# Move the wheel into place and mirror it across the X and Z axes
wheels = wheel.translate(1.0, 0.0, 0.6).mirror_x().mirror_z()

body.union(wheels)
"""


class CompileResult(NamedTuple):
    shader: Optional[str]
    error: Optional[str]

    @property
    def ok(self) -> bool:
        return self.error is None


class ModelerSession:
    """
    Holds the editable scene script and the last successfully compiled shader.

    A failed compile records the error and leaves `current_shader` untouched,
    so the renderer keeps showing the last good scene.
    """
    def __init__(self, code: str = DEFAULT_SCENE, aa=AntiAliasingLevel.OFF, filename: str = '<scene>'):
        self.code_text = code
        self.aa = AntiAliasingLevel.parse(aa)
        self.filename = filename
        self.current_shader = None
        self.compiler_error = None
        self.generation = 0

    def compile(self, code: str = None) -> CompileResult:
        """Compiles the given script text (or the current one) into a shader."""
        if code is not None:
            self.code_text = code
        try:
            root = evaluate_script(self.code_text, filename=self.filename)
            shader = compile_shader(root, self.aa)
        except (ScriptError, GenerationError) as e:
            self.compiler_error = str(e)
            return CompileResult(None, self.compiler_error)

        self.current_shader = shader
        self.compiler_error = None
        self.generation += 1
        return CompileResult(shader, None)

    def set_antialiasing(self, aa) -> CompileResult:
        self.aa = AntiAliasingLevel.parse(aa)
        return self.compile()
