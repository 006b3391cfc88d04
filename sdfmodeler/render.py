import sys
import os
import time
import threading
from pathlib import Path
import numpy as np
from .codegen import AntiAliasingLevel
from .errors import ResourceError
from .loader import stage_source
from .session import ModelerSession

try:
    from watchdog.observers import Observer
    from watchdog.events import FileSystemEventHandler
    WATCHDOG_AVAILABLE = True
except ImportError:
    WATCHDOG_AVAILABLE = False

UNIFORM_BLOCK = 'Uniforms'
UNIFORM_FLOATS = 24  # six std140 vec4 slots
BACKGROUND = (0.1, 0.12, 0.15)

AA_KEYS = {
    'F1': AntiAliasingLevel.OFF,
    'F2': AntiAliasingLevel.GRID_2X2,
    'F3': AntiAliasingLevel.GRID_4X4,
    'F4': AntiAliasingLevel.GRID_8X8,
}


class Camera:
    """A free-flying viewport camera described by a position, yaw and pitch."""
    def __init__(self, position=(5.0, 5.0, 5.0), speed: float = 4.0, sensitivity: float = 0.005):
        self.position = np.array(position, dtype=float)
        direction = -self.position / np.linalg.norm(self.position)
        self.yaw = float(np.arctan2(direction[2], direction[0]))
        self.pitch = float(np.arcsin(direction[1]))
        self.speed = speed
        self.sensitivity = sensitivity

    def basis(self):
        """Returns the (front, right, up) unit vectors."""
        front = np.array([
            np.cos(self.yaw) * np.cos(self.pitch),
            np.sin(self.pitch),
            np.sin(self.yaw) * np.cos(self.pitch),
        ])
        front /= np.linalg.norm(front)
        right = np.cross(front, [0.0, 1.0, 0.0])
        right /= np.linalg.norm(right)
        up = np.cross(right, front)
        return front, right, up / np.linalg.norm(up)

    def update(self, dt: float, keys=(), drag=(0.0, 0.0)):
        """
        Applies one frame of input.

        Args:
            dt (float): Seconds since the last frame, clamped to 0.1.
            keys (iterable): Held movement keys among 'W', 'A', 'S', 'D', 'Q', 'E'.
            drag (tuple): Cursor movement (dx, dy) in pixels while looking around.
        """
        dt = min(dt, 0.1)
        self.yaw += drag[0] * self.sensitivity
        self.pitch = float(np.clip(self.pitch - drag[1] * self.sensitivity, -1.5, 1.5))

        forward = np.array([np.cos(self.yaw), 0.0, np.sin(self.yaw)])
        right = np.array([-np.sin(self.yaw), 0.0, np.cos(self.yaw)])
        up = np.array([0.0, 1.0, 0.0])
        directions = {'W': forward, 'S': -forward, 'D': right, 'A': -right, 'E': up, 'Q': -up}

        move = np.zeros(3)
        for key in keys:
            if key in directions:
                move += directions[key]
        if np.dot(move, move) > 0.0:
            self.position += move / np.linalg.norm(move) * self.speed * dt


def pack_uniforms(rect, framebuffer_size, elapsed: float, camera: Camera) -> np.ndarray:
    """Packs the std140 Uniforms block declared by the shader template."""
    front, right, up = camera.basis()
    data = np.zeros(UNIFORM_FLOATS, dtype='f4')
    data[0:4] = rect
    data[4:8] = (elapsed % 1000.0, framebuffer_size[0], framebuffer_size[1], 0.0)
    data[8:11], data[11] = camera.position, 1.0
    data[12:15] = right
    data[16:19] = up
    data[20:23] = front
    return data


class RenderResources:
    """The GPU objects built from one compiled shader."""
    def __init__(self, program, uniform_buffer, vbo, vao, generation: int = 0):
        self.program = program
        self.uniform_buffer = uniform_buffer
        self.vbo = vbo
        self.vao = vao
        self.generation = generation

    @classmethod
    def create(cls, ctx, shader_source: str, generation: int = 0) -> 'RenderResources':
        """
        Builds the program, uniform buffer and full-screen quad.

        Raises:
            ResourceError: When the GL driver rejects the shader or buffers.
        """
        try:
            program = ctx.program(
                vertex_shader=stage_source(shader_source, 'VERTEX_SHADER'),
                fragment_shader=stage_source(shader_source, 'FRAGMENT_SHADER'),
            )
        except Exception as e:
            raise ResourceError(f"Shader compilation failed:\n{e}") from e

        try:
            uniform_buffer = ctx.buffer(reserve=UNIFORM_FLOATS * 4)
            program[UNIFORM_BLOCK].binding = 0
            vertices = np.array([-1.0, -1.0, -1.0, 1.0, 1.0, -1.0, 1.0, 1.0], dtype='f4')
            vbo = ctx.buffer(vertices.tobytes())
            vao = ctx.simple_vertex_array(program, vbo, 'in_vert')
        except Exception as e:
            program.release()
            raise ResourceError(f"Failed to create render resources: {e}") from e
        return cls(program, uniform_buffer, vbo, vao, generation)

    def draw(self, uniforms: np.ndarray, mode):
        self.uniform_buffer.write(uniforms.tobytes())
        self.uniform_buffer.bind_to_uniform_block(0)
        self.vao.render(mode=mode)

    def release(self):
        for obj in (self.vao, self.vbo, self.uniform_buffer, self.program):
            obj.release()


class ShaderSlot:
    """
    The published render resources. Readers take the current value under the
    lock; a successful recompile swaps in a complete new set in one step.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._resources = None

    def current(self):
        with self._lock:
            return self._resources

    def publish(self, resources):
        """Replaces the published resources and returns the previous ones."""
        with self._lock:
            previous, self._resources = self._resources, resources
        return previous

    def invalidate(self):
        return self.publish(None)


class NativeRenderer:
    """
    OpenGL viewport using ModernGL and GLFW.

    Renders the session's current shader, recompiles the scene script when it
    changes on disk, and switches the anti-aliasing level with F1-F4.
    """
    def __init__(self, session: ModelerSession, script_path=None, watch=True, width=1280, height=720):
        self.session = session
        self.script_path = os.path.abspath(script_path) if script_path else None
        self.watching = watch and WATCHDOG_AVAILABLE and self.script_path is not None
        self.width = width
        self.height = height

        self.window = None
        self.ctx = None
        self.slot = ShaderSlot()
        self.camera = Camera()
        self.reload_pending = False
        self._observer = None
        self._last_cursor = None

    def _init_context(self):
        import glfw
        import moderngl
        if not glfw.init(): raise RuntimeError("Could not initialize GLFW")
        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
        glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, True)

        self.window = glfw.create_window(self.width, self.height, "SDF Modeler", None, None)
        if not self.window: glfw.terminate(); raise RuntimeError("Could not create GLFW window.")
        glfw.make_context_current(self.window)
        glfw.set_key_callback(self.window, self._on_key)
        self.ctx = moderngl.create_context()

    def _rebuild(self):
        """Builds resources for the session's shader and publishes them."""
        shader = self.session.current_shader
        if shader is None:
            return False
        try:
            resources = RenderResources.create(self.ctx, shader, self.session.generation)
        except ResourceError as e:
            print(f"ERROR: {e}\nKeeping the previous shader.", file=sys.stderr)
            return False
        previous = self.slot.publish(resources)
        if previous is not None:
            previous.release()
        print(f"INFO: Shader compiled successfully ({self.session.aa.label}).")
        return True

    def recompile(self, code: str = None):
        """Recompiles the scene script and republishes on success."""
        result = self.session.compile(code)
        if not result.ok:
            print(f"ERROR: {result.error}", file=sys.stderr)
            return False
        return self._rebuild()

    def set_antialiasing(self, aa):
        result = self.session.set_antialiasing(aa)
        if not result.ok:
            print(f"ERROR: {result.error}", file=sys.stderr)
            return False
        return self._rebuild()

    def _reload_script(self):
        print(f"INFO: Change detected in '{Path(self.script_path).name}'. Reloading...")
        try:
            with open(self.script_path, 'r') as f:
                code = f.read()
        except OSError as e:
            print(f"ERROR: Failed to read script: {e}", file=sys.stderr)
            return False
        return self.recompile(code)

    def _on_key(self, window, key, scancode, action, mods):
        import glfw
        if action != glfw.PRESS:
            return
        for name, level in AA_KEYS.items():
            if key == getattr(glfw, f"KEY_{name}"):
                self.set_antialiasing(level)
                return
        if key == glfw.KEY_R and self.script_path:
            self.reload_pending = True

    def _poll_camera(self, dt):
        import glfw
        keys = [k for k in 'WASDQE' if glfw.get_key(self.window, getattr(glfw, f"KEY_{k}")) == glfw.PRESS]
        cursor = glfw.get_cursor_pos(self.window)
        drag = (0.0, 0.0)
        if glfw.get_mouse_button(self.window, glfw.MOUSE_BUTTON_MIDDLE) == glfw.PRESS and self._last_cursor:
            drag = (cursor[0] - self._last_cursor[0], cursor[1] - self._last_cursor[1])
        self._last_cursor = cursor
        self.camera.update(dt, keys, drag)

    def _start_watcher(self):
        if not self.watching:
            if self.script_path and not WATCHDOG_AVAILABLE:
                print("INFO: Hot-reloading disabled. `watchdog` not installed. Run 'pip install watchdog'.")
            return

        class ChangeHandler(FileSystemEventHandler):
            def __init__(self, renderer): self.renderer = renderer
            def on_modified(self, event):
                if os.path.abspath(event.src_path) == self.renderer.script_path:
                    self.renderer.reload_pending = True

        observer = Observer()
        observer.schedule(ChangeHandler(self), str(Path(self.script_path).parent), recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        print(f"INFO: Watching '{Path(self.script_path).name}' for changes...")

    def run(self):
        import glfw
        import moderngl
        self._init_context()
        if self.session.current_shader is None:
            result = self.session.compile()
            if not result.ok:
                print(f"ERROR: {result.error}", file=sys.stderr)
        if not self._rebuild():
            print("ERROR: No shader could be built for the initial scene.", file=sys.stderr)

        self._start_watcher()
        start = last = time.time()
        try:
            while not glfw.window_should_close(self.window):
                if self.reload_pending:
                    self.reload_pending = False
                    self._reload_script()

                now = time.time()
                self._poll_camera(now - last)
                last = now

                width, height = glfw.get_framebuffer_size(self.window)
                self.ctx.viewport = (0, 0, width, height)
                self.ctx.clear(*BACKGROUND)

                resources = self.slot.current()
                if resources is not None and width > 0 and height > 0:
                    uniforms = pack_uniforms((0.0, 0.0, width, height), (width, height), now - start, self.camera)
                    resources.draw(uniforms, moderngl.TRIANGLE_STRIP)

                glfw.swap_buffers(self.window)
                glfw.poll_events()
        finally:
            if self._observer is not None:
                self._observer.stop()
            resources = self.slot.invalidate()
            if resources is not None:
                resources.release()
            glfw.terminate()


def view(path=None, aa='off', watch=True, **kwargs):
    """
    Opens a viewport for a scene script file, or the built-in demo scene.

    Args:
        path (str, optional): Scene script to load and watch for changes.
        aa (str or AntiAliasingLevel): Initial anti-aliasing level.
        watch (bool): Whether to recompile when the script file changes.
    """
    if path is not None:
        with open(path, 'r') as f:
            session = ModelerSession(f.read(), aa=aa, filename=str(path))
    else:
        session = ModelerSession(aa=aa)

    if not os.environ.get("DISPLAY") and sys.platform == 'linux':
        print("WARNING: No display detected. Window creation may fail.", file=sys.stderr)

    renderer = NativeRenderer(session, script_path=path, watch=watch, **kwargs)
    try:
        renderer.run()
    except RuntimeError as e:
        print(f"ERROR: Failed to launch window: {e}", file=sys.stderr)
    return renderer
