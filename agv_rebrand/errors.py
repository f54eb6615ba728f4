class InputValidationError(ValueError):
    """Malformed identifier supplied by the caller."""


class UpstreamError(RuntimeError):
    """The remote agv API failed or answered outside its contract."""
