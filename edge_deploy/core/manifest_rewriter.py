"""Registry credential substitution in deployment manifests"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from ..models.credential import Credential, RegistryReference
from ..models.manifest import DeploymentManifest
from ..models.result import RewriteReport
from .server_match import ServerMatchPolicy

logger = logging.getLogger(__name__)


class ManifestRewriter:
    """Replaces placeholder registry credentials with resolved ones

    Substitution is partial: entries without placeholders, and placeholder
    entries no candidate matches, are written back unchanged.
    """

    def __init__(self, policy: Optional[ServerMatchPolicy] = None):
        self.policy = policy or ServerMatchPolicy()

    def find_candidate(self, address: str, candidates: Sequence[Credential]) -> Optional[Credential]:
        """First candidate, in insertion order, whose server matches the address"""
        for candidate in candidates:
            if self.policy.matches(address, candidate.server_url):
                return candidate
        return None

    def apply(self, manifest: DeploymentManifest, candidates: Sequence[Credential]) -> RewriteReport:
        """Substitute credentials in an in-memory manifest"""
        report = RewriteReport(manifest_path=str(manifest.path) if manifest.path else "")

        credentials = manifest.registry_credentials()
        if credentials is None:
            logger.debug("No registryCredentials block in manifest")
            return report

        for key in list(credentials.keys()):
            entry = credentials[key]
            if not isinstance(entry, dict):
                continue

            reference = RegistryReference.from_dict(entry)
            if not reference.needs_substitution:
                continue

            logger.debug("Looking for a credential for registry %s", reference.address)
            candidate = self.find_candidate(reference.address, candidates)
            if candidate is None:
                report.unresolved.append(key)
                continue

            logger.info("Replacing credential for %s", reference.address)
            credentials[key] = {
                'username': candidate.username,
                'password': candidate.password,
                'address': reference.address,
            }
            report.replaced[key] = candidate.server_url

        if report.unresolved:
            logger.warning(
                "No matching credential for registry entries: %s",
                ", ".join(report.unresolved)
            )

        return report

    def rewrite(self, manifest_path: Union[str, Path], candidates: Sequence[Credential]) -> RewriteReport:
        """Rewrite a manifest file in place

        Args:
            manifest_path: Deployment manifest to update
            candidates: Resolved credentials, earlier entries win

        Returns:
            RewriteReport describing replaced and unresolved entries

        Raises:
            FileNotFoundValidationError: manifest does not exist
            ManifestParseError: manifest is not valid JSON
        """
        manifest = DeploymentManifest.load(manifest_path)

        if manifest.registry_credentials() is None:
            logger.debug("Manifest %s has no registry credentials; leaving it as is", manifest_path)
            return RewriteReport(manifest_path=str(manifest_path))

        report = self.apply(manifest, candidates)
        manifest.save()
        report.written = True
        return report
