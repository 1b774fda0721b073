"""Helpers for IoT Hub deployment creation"""

import glob
import json
import logging
from pathlib import Path
from typing import List, Optional

from ..constants import (
    DEPLOYMENT_ID_INVALID_CHARS,
    DEPLOYMENT_ID_MAX_LENGTH,
    DEVICE_OPTION_SINGLE,
)
from ..models.manifest import DeploymentManifest
from ..api.exceptions import ManifestParseError, ValidationError

logger = logging.getLogger(__name__)


def normalize_deployment_id(deployment_id: str) -> str:
    """Make a deployment id acceptable to IoT Hub

    Truncated to 128 characters, lowercased, and stripped of characters
    outside ``a-z 0-9 - : + % _ # * ? ! ( ) , = @ ; '``.
    """
    value = deployment_id[:DEPLOYMENT_ID_MAX_LENGTH].lower()
    return DEPLOYMENT_ID_INVALID_CHARS.sub('', value)


def parse_priority(value: Optional[str]) -> int:
    """Leading integer of the input, 0 when there is none"""
    if value is None:
        return 0
    text = value.strip()
    digits = ''
    for i, ch in enumerate(text):
        if ch.isdigit() or (i == 0 and ch in '+-'):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return 0


def target_condition(device_option: str, device_id: Optional[str] = None,
                     condition: Optional[str] = None) -> str:
    """Target condition for a single device or for a device query"""
    if device_option == DEVICE_OPTION_SINGLE:
        if not device_id:
            raise ValidationError("Device id is required for a single device deployment")
        return f"deviceId='{device_id}'"
    if not condition:
        raise ValidationError("Target condition is required for a multiple devices deployment")
    return condition


def find_deployment_files(pattern: str) -> List[Path]:
    """Files matching a path that may contain wildcards"""
    if any(ch in pattern for ch in "*?["):
        return [Path(p) for p in sorted(glob.glob(pattern, recursive=True)) if Path(p).is_file()]
    path = Path(pattern)
    return [path] if path.is_file() else []


def first_valid_manifest(paths: List[Path]) -> Optional[DeploymentManifest]:
    """First candidate that parses as a JSON object; invalid ones are skipped"""
    for path in paths:
        logger.info("Checking if %s is a valid JSON deployment file", path)
        try:
            manifest = DeploymentManifest.load(path)
        except (ManifestParseError, ValidationError) as e:
            logger.info("Invalid: %s", e)
            continue
        logger.info("Valid")
        return manifest
    return None


def write_deployment_content(manifest: DeploymentManifest, directory: Path, stamp: int) -> Path:
    """Wrap a manifest as ``{"content": ...}`` for ``az iot edge deployment create``"""
    path = directory / f"deployment_{stamp}.json"
    with open(path, 'w', encoding='utf-8') as f:
        json.dump({'content': manifest.data}, f, indent=2, ensure_ascii=False)
    return path
