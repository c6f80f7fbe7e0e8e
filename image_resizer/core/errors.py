class ImageResizerError(Exception):
    """Base class for everything this package raises on purpose."""


class ValidationError(ImageResizerError):
    """Configuration is unusable; the run must stop before any work starts."""


class InputDirError(ValidationError):
    pass


class OutputDirError(ValidationError):
    pass


class NestedOutputError(ValidationError):
    pass


class ResolutionError(ValidationError):
    pass


class WorkerCountError(ValidationError):
    pass


class EnumerationError(ImageResizerError):
    """Walking the input tree failed."""


class ResizeError(ImageResizerError):
    """A single file could not be resized. Recorded, never fatal."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path
