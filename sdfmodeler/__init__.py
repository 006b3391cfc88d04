from .core import SDFNode, X, Y, Z
from .primitives import sphere, box, cylinder, torus
from .codegen import AntiAliasingLevel, ShaderGenerator, compile_shader, generate
from .errors import SDFModelerError, ScriptError, GenerationError, ResourceError
from .script import evaluate_script
from .session import ModelerSession, CompileResult
from .render import view
