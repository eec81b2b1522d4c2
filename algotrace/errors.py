"""
Exception types shared across algotrace.
"""


class AlgotraceError(Exception):
    """Base class for algotrace errors."""
    pass


class PreconditionError(AlgotraceError):
    """An algorithm was invoked on input it cannot handle.

    Raised before any step is recorded, so no trace exists for the call.
    """
    pass


class ValidationError(AlgotraceError):
    """Error during scenario or configuration validation."""
    pass
