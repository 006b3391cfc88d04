from pathlib import Path
from functools import lru_cache

PLACEHOLDER = "// {{MAP_FUNCTION_HERE}}"
TEMPLATE_PATH = Path(__file__).parent / 'glsl' / 'template.glsl'

STAGES = ('VERTEX_SHADER', 'FRAGMENT_SHADER')


@lru_cache(maxsize=None)
def load_template(path: Path = TEMPLATE_PATH) -> str:
    """Reads the boilerplate template once; later calls return the cached text."""
    with open(path, 'r') as f:
        template = f.read()
    count = template.count(PLACEHOLDER)
    if count != 1:
        raise RuntimeError(f"Shader template '{path}' must contain exactly one '{PLACEHOLDER}', found {count}.")
    return template


def merge(generated: str, template: str = None) -> str:
    """Splices generated code into the template at the placeholder."""
    if template is None:
        template = load_template()
    elif template.count(PLACEHOLDER) != 1:
        raise RuntimeError(f"Shader template must contain exactly one '{PLACEHOLDER}'.")
    return template.replace(PLACEHOLDER, generated)


def stage_source(shader: str, stage: str) -> str:
    """
    Selects one pipeline stage of a merged shader by defining its guard
    macro right after the #version line.
    """
    if stage not in STAGES:
        raise ValueError(f"Unknown shader stage '{stage}'. Use one of {STAGES}.")
    version, sep, rest = shader.partition('\n')
    if not version.startswith('#version'):
        return f"#define {stage}\n{shader}"
    return f"{version}\n#define {stage}\n{rest}"
