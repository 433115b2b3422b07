"""
Exceptions raised while building and querying opacity tables.

Structural input problems fail fast and are never corrected silently.
Numerical anomalies found while baking (mixed zero and nonzero
cross-sections) are not errors; they are logged and sanitized.
"""


class OpacityTablesError(Exception):
    """Base class for all opacity table errors."""
    pass


class DomainError(OpacityTablesError, ValueError):
    """Raised when a temperature/pressure sampling domain is invalid."""
    pass


class WavenumberError(OpacityTablesError, ValueError):
    """Raised when a wavenumber grid is not ascending or has negatives."""
    pass


class ConcentrationError(OpacityTablesError, ValueError):
    """Raised when a molar concentration falls outside [0, 1]."""
    pass
