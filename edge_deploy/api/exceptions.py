"""Exception definitions for edge-deploy"""

from typing import List, Optional

from ..constants import ErrorCode


class EdgeDeployError(Exception):
    """Base exception for edge-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ValidationError(EdgeDeployError):
    """Missing or invalid input"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.VALIDATION_FAILED)


class MissingInputError(ValidationError):
    """Required task input not supplied"""

    def __init__(self, name: str):
        super().__init__(f"Input required: {name}")
        self.error_code = ErrorCode.MISSING_REQUIRED_PARAMETER
        self.name = name


class FileNotFoundValidationError(ValidationError):
    """A required file does not exist"""

    def __init__(self, file_path: str, what: str = "File"):
        super().__init__(f"{what} not found: {file_path}")
        self.error_code = ErrorCode.FILE_NOT_FOUND
        self.file_path = file_path


class ManifestParseError(EdgeDeployError):
    """Deployment manifest is not valid JSON"""

    def __init__(self, manifest_path: str, reason: str):
        super().__init__(
            f"Failed to parse deployment manifest {manifest_path}: {reason}",
            ErrorCode.MANIFEST_PARSE_FAILED,
        )
        self.manifest_path = manifest_path


class AuthenticationError(EdgeDeployError):
    """Login to the cloud identity provider was rejected"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED)


class SubprocessError(EdgeDeployError):
    """External tool returned a non-zero exit code"""

    def __init__(
        self,
        command: List[str],
        returncode: int,
        stderr: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            # Only the tool and subcommand; later arguments may carry secrets
            message = f"Command '{' '.join(command[:2])}' failed with exit code {returncode}"
            if stderr:
                message += f": {stderr.strip()}"
        super().__init__(message, ErrorCode.SUBPROCESS_FAILED)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class CredentialResolutionError(EdgeDeployError):
    """Registry credential record is incomplete"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CREDENTIAL_INCOMPLETE)


class ConfigError(EdgeDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)
