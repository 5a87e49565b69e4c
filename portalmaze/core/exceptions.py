"""Custom exception hierarchy for the portal maze engine."""


class PortalMazeError(Exception):
    """Base exception for engine failures."""


class MalformedGridError(PortalMazeError):
    """Raised when a grid cannot be built from the supplied rows."""


class ValidationError(PortalMazeError):
    """Raised when an authored level fails the structural or solvability checks."""
