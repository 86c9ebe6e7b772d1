"""
Exception types raised by the iconscope engine.
"""


class ConfigurationError(ValueError):
    """Raised when a run configuration or palette definition is invalid."""
