"""Hand-off of registry credentials between pipeline steps"""

import base64
import binascii
import json
import logging
from typing import List

from ..constants import VARIABLE_DOCKER_CREDENTIAL
from ..models.credential import Credential
from .pipeline_host import PipelineHost

logger = logging.getLogger(__name__)


class CredentialStore:
    """Credentials pushed by earlier steps of the same job

    Stored as a base64 encoded JSON list in a secret pipeline variable so a
    later deploy or push step can fill in every registry the job has used.
    """

    def __init__(self, host: PipelineHost, variable: str = VARIABLE_DOCKER_CREDENTIAL):
        self.host = host
        self.variable = variable

    def read(self) -> List[Credential]:
        raw = self.host.get_variable(self.variable)
        if not raw:
            return []
        try:
            entries = json.loads(base64.b64decode(raw).decode('utf-8'))
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable %s: %s", self.variable, e)
            return []
        return [Credential.from_dict(entry) for entry in entries if isinstance(entry, dict)]

    def append(self, credential: Credential) -> List[Credential]:
        credentials = self.read()
        credentials.append(credential)
        payload = json.dumps([c.to_dict() for c in credentials])
        self.host.set_variable(
            self.variable,
            base64.b64encode(payload.encode('utf-8')).decode('ascii'),
            secret=True,
        )
        return credentials
