
class PlateAuditError(Exception):
    """Base class for errors raised by the detection core."""


class InvalidInputError(PlateAuditError, ValueError):
    """Source image is missing, empty or not a 3-channel buffer."""


class ResourceUnavailableError(PlateAuditError, FileNotFoundError):
    """Cascade model file is missing or could not be parsed."""
