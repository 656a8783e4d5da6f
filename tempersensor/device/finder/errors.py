class SensorNotFoundError(RuntimeError):
    """Raised when no supported sensor could be found."""
    pass
