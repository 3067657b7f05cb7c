class ConfigError(Exception):
    """Raised when a site configuration is missing or malformed."""


class BuildError(Exception):
    """Raised when a site cannot be built from its pages."""
