"""Exceptions raised while reading scene descriptions."""


class SceneError(ValueError):
    """A scene description is malformed or refers to something undefined."""


class ObjParseError(SceneError):
    """A Wavefront OBJ record could not be parsed."""
