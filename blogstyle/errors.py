"""Engine exceptions."""


class InputError(ValueError):
    """Caller passed a value that violates an engine contract (e.g. non-text content)."""
