"""
Errors raised by the scheduling engine.
"""


class InvalidConfiguration(ValueError):
    """Raised for negative counts or durations and non-positive cycle sizes."""
