import pytest
import os
import shutil
import subprocess
import tempfile
from sdfmodeler.loader import stage_source

# Dependency checks
try:
    import moderngl
    HEADLESS_SUPPORTED = True
except ImportError:
    HEADLESS_SUPPORTED = False

GLSL_VALIDATOR = shutil.which("glslangValidator")
SKIP_GLSL = os.environ.get("SKIP_GLSL", "") == "1"

requires_glsl_validator = pytest.mark.skipif(
    not GLSL_VALIDATOR or SKIP_GLSL,
    reason="Requires glslangValidator."
)

@pytest.fixture(scope="session")
def headless_env():
    """Provides a standalone OpenGL 3.3 context, or skips when none can be created."""
    if not HEADLESS_SUPPORTED:
        pytest.skip("moderngl not installed.")
    try:
        ctx = moderngl.create_standalone_context(require=330)
    except Exception as e:
        pytest.skip(f"Failed to init headless context: {e}")
    yield ctx
    ctx.release()

@pytest.fixture(scope="session")
def validate_glsl():
    def _validator(shader: str):
        for stage, suffix in (('VERTEX_SHADER', '.vert'), ('FRAGMENT_SHADER', '.frag')):
            with tempfile.NamedTemporaryFile(suffix=suffix, mode="w", delete=False) as f:
                f.write(stage_source(shader, stage))
                path = f.name
            try:
                result = subprocess.run([GLSL_VALIDATOR, path], capture_output=True, text=True)
            finally:
                os.remove(path)
            if result.returncode != 0:
                raise AssertionError(f"GLSL Validation Failed ({stage}):\n{result.stdout}{result.stderr}")
    return _validator
