"""Global constants for edge-deploy"""

import re

APP_NAME = "edge-deploy"
LOG_FORMAT = "%(message)s"

# Project configuration
PROJECT_CONFIG_FILE = ".edge-deploy.yaml"

# Task actions, as selected by the host task runner
ACTION_BUILD = "Build module images"
ACTION_PUSH = "Push module images"
ACTION_DEPLOY = "Deploy to IoT Edge devices"
ACTIONS = [ACTION_BUILD, ACTION_PUSH, ACTION_DEPLOY]

# Registry types
REGISTRY_TYPE_ACR = "Azure Container Registry"
REGISTRY_TYPE_GENERIC = "Generic Container Registry"

# Device selection
DEVICE_OPTION_SINGLE = "Single Device"
DEVICE_OPTION_MULTIPLE = "Multiple Devices"

# External tools
IOTEDGEDEV = "iotedgedev"
AZURE_CLI = "az"
DOCKER = "docker"
DEFAULT_IOTEDGEDEV_VERSION = "1.1.0"
DEFAULT_IOT_EXTENSION_NAME = "azure-iot"
DEFAULT_AZURE_CLOUD = "AzureCloud"

# Environment contract consumed by iotedgedev
ENV_REGISTRY_SERVER = "CONTAINER_REGISTRY_SERVER"
ENV_REGISTRY_USERNAME = "CONTAINER_REGISTRY_USERNAME"
ENV_REGISTRY_PASSWORD = "CONTAINER_REGISTRY_PASSWORD"
ENV_BYPASS_MODULES = "BYPASS_MODULES"
ENV_DEPLOYMENT_FILE_OUTPUT_FOLDER = "CONFIG_OUTPUT_DIR"

# Environment variables read by edge-deploy itself
ENV_CONFIG_PATH = "EDGE_DEPLOY_CONFIG"
ENV_LOG_LEVEL = "EDGE_DEPLOY_LOG_LEVEL"

# Pipeline variables
VARIABLE_IOTEDGEDEV_VERSION = "IOTEDGEDEV_VERSION"
VARIABLE_OUTPUT_FOLDER = "Build.ArtifactStagingDirectory"
VARIABLE_HOST_TYPE = "System.HostType"
VARIABLE_DOCKER_CREDENTIAL = "VSTS_EXTENSION_EDGE_DOCKER_CREDENTIAL"
OUTPUT_VARIABLE_DEPLOYMENT_PATH = "DEPLOYMENT_FILE_PATH"

# Deployment manifest layout
MODULES_CONTENT_KEYS = ["modulesContent", "moduleContent"]
EDGE_AGENT_MODULE = "$edgeAgent"
DESIRED_PROPERTIES_KEY = "properties.desired"
PLACEHOLDER_SIGIL = "$"
MANIFEST_INDENT = 2

# Registry matching
DEFAULT_DOCKER_HUB_HOSTS = [
    "docker.io",
    "index.docker.io",
    "registry-1.docker.io",
    "registry.hub.docker.com",
]

# Subprocess output pattern
EXPANDING_PATTERN = re.compile(r"Expanding '[^']*' to '([^']*)'")

# Deployment id rules
DEPLOYMENT_ID_MAX_LENGTH = 128
DEPLOYMENT_ID_INVALID_CHARS = re.compile(r"[^a-z0-9\-:+%_#*?!(),=@;']")

# Known az CLI messages
AZ_EXTENSION_EXISTS = "already exists"
AZ_LIBFFI_MISSING = "ImportError: libffi.so.5"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "ED001"
    FILE_NOT_FOUND = "ED002"
    MISSING_REQUIRED_PARAMETER = "ED003"
    MANIFEST_PARSE_FAILED = "ED004"
    AUTHENTICATION_FAILED = "ED005"
    SUBPROCESS_FAILED = "ED006"
    CREDENTIAL_INCOMPLETE = "ED007"
    VALIDATION_FAILED = "ED008"
