class SDFModelerError(Exception):
    """Base class for errors surfaced to the host interaction loop."""


class ScriptError(SDFModelerError):
    """The scene script could not be turned into an SDFNode."""


class ResourceError(SDFModelerError):
    """The renderer could not build GPU objects from generated shader text."""


class GenerationError(SDFModelerError):
    """A scene tree could not be turned into shader text."""
