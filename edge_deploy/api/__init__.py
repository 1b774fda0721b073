"""Public API for edge-deploy"""

from .exceptions import (
    EdgeDeployError,
    ValidationError,
    MissingInputError,
    FileNotFoundValidationError,
    ManifestParseError,
    AuthenticationError,
    SubprocessError,
    CredentialResolutionError,
    ConfigError,
)

__all__ = [
    "EdgeDeployError",
    "ValidationError",
    "MissingInputError",
    "FileNotFoundValidationError",
    "ManifestParseError",
    "AuthenticationError",
    "SubprocessError",
    "CredentialResolutionError",
    "ConfigError",
]
