class ContribGraphError(Exception):
    """Base class for failures that abort a render."""


class HistoryReadError(ContribGraphError):
    """Raised when the commit history cannot be read from git."""


class RenderError(ContribGraphError):
    """Raised when markup cannot be rasterized or the PNG cannot be written."""
