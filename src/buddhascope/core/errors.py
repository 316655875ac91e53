"""Error types shared across the engine."""


class ConfigurationError(ValueError):
    """Raised before any computation starts when a run is misconfigured."""
