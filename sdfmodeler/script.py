import ast
from .core import SDFNode, X, Y, Z
from .primitives import sphere, box, cylinder, torus
from .errors import ScriptError


def script_namespace() -> dict:
    """The names available to a scene script."""
    return {
        '__name__': 'scene_script',
        'sphere': sphere,
        'box': box,
        'cylinder': cylinder,
        'torus': torus,
        'X': X, 'Y': Y, 'Z': Z,
    }


def evaluate_script(source: str, filename: str = '<scene>') -> SDFNode:
    """
    Evaluates scene script text and returns the scene it builds.

    The scene is the return value of a `main()` function when the script
    defines one, otherwise the value of its final expression statement.

    Raises:
        ScriptError: On syntax or runtime errors, or when the script does
                     not produce an SDFNode.
    """
    try:
        tree = ast.parse(source, filename=filename, mode='exec')
    except SyntaxError as e:
        raise ScriptError(f"Script Error: {e}") from e

    result_expr = None
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        result_expr = ast.Expression(tree.body.pop().value)

    namespace = script_namespace()
    try:
        exec(compile(tree, filename, 'exec'), namespace)
        if callable(namespace.get('main')):
            result = namespace['main']()
        elif result_expr is not None:
            result = eval(compile(result_expr, filename, 'eval'), namespace)
        else:
            raise ScriptError("Script Error: the script produced no scene. "
                              "End it with an expression or define main().")
    except ScriptError:
        raise
    except (Exception, SystemExit) as e:
        raise ScriptError(f"Script Error: {type(e).__name__}: {e}") from e

    if not isinstance(result, SDFNode):
        raise ScriptError(f"Script Error: expected the script to produce an SDFNode, "
                          f"got {type(result).__name__}")
    return result


def evaluate_file(path) -> SDFNode:
    with open(path, 'r') as f:
        source = f.read()
    return evaluate_script(source, filename=str(path))
