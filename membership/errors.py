class InvalidConfig(ValueError):
    """Raised when a filter or its sizing inputs are out of range."""
