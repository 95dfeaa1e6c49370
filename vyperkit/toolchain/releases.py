"""
Release catalog for Vyper binaries.

Lists the releases published on GitHub and keeps, for each version, the
asset built for the requested platform. The GitHub response looks like::

    [
        {
            "tag_name": "v0.3.3",
            "assets": [
                {
                    "name": "vyper.0.3.3+commit.48e326f0.darwin",
                    "digest": "sha256:...",
                    "browser_download_url": "https://github.com/..."
                }
            ]
        }
    ]

Only assets whose name contains the platform token are kept. When a release
carries several matching assets, the last one in response order wins.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote, unquote

import requests
from requests.exceptions import RequestException, Timeout

from vyperkit.core.config import DOWNLOAD_BASE_URL, GITHUB_RELEASES
from vyperkit.core.download import REQUEST_TIMEOUT, USER_AGENT
from vyperkit.core.exceptions import (
    DownloadError,
    DownloadTimeoutError,
    ReleaseCatalogError,
    UnknownVersionError,
    UnsuccessfulResponseError,
)
from vyperkit.core.platform import Platform
from vyperkit.core.version import Version

logger = logging.getLogger(__name__)

_DIGEST_PREFIX = "sha256:"


@dataclass
class BuildInfo:
    """SHA256 checksum of one platform binary, when the catalog publishes it."""

    version: Version
    sha256: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"version": str(self.version), "sha256": self.sha256 or ""}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildInfo":
        return cls(
            version=Version.parse(data["version"]),
            sha256=data.get("sha256") or None,
        )


@dataclass
class Releases:
    """Available versions for one platform and their artifact names."""

    builds: List[BuildInfo] = field(default_factory=list)
    releases: Dict[Version, str] = field(default_factory=dict)

    def get_artifact(self, version: Version) -> Optional[str]:
        """Artifact name for a version, if any."""
        return self.releases.get(version)

    def get_checksum(self, version: Version) -> Optional[str]:
        """
        Published SHA256 hex digest for a version.

        Returns the digest of the build whose artifact is selected for the
        version, or None when GitHub published no digest for it.
        """
        for build in reversed(self.builds):
            if build.version == version:
                return build.sha256
        return None

    def versions(self) -> List[Version]:
        """Sorted list of all versions."""
        return sorted(self.releases)

    def __contains__(self, version: object) -> bool:
        return version in self.releases

    def __len__(self) -> int:
        return len(self.releases)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "builds": [build.to_dict() for build in self.builds],
            "releases": {str(v): name for v, name in self.releases.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Releases":
        return cls(
            builds=[BuildInfo.from_dict(b) for b in data.get("builds", [])],
            releases={
                Version.parse(v): name for v, name in data.get("releases", {}).items()
            },
        )


def parse_releases(payload: Any, platform: Platform) -> Releases:
    """
    Build the version -> artifact map for a platform.

    Args:
        payload: Decoded JSON list of GitHub release objects
        platform: Platform whose assets to keep

    Returns:
        Releases for the platform

    Raises:
        ReleaseCatalogError: If the payload does not have the release shape
    """
    if not isinstance(payload, list):
        raise ReleaseCatalogError(
            f"Expected a list of releases, got {type(payload).__name__}"
        )

    result = Releases()
    token = platform.token

    for release in payload:
        if not isinstance(release, dict) or "tag_name" not in release:
            raise ReleaseCatalogError(f"Malformed release entry: {release!r}")

        assets = release.get("assets", [])
        if not isinstance(assets, list):
            raise ReleaseCatalogError(
                f"Malformed assets for release {release['tag_name']}"
            )

        version = Version.try_parse(str(release["tag_name"]))
        if version is None:
            logger.debug(f"Skipping release with non-semver tag: {release['tag_name']}")
            continue

        for asset in assets:
            if not isinstance(asset, dict) or "name" not in asset:
                raise ReleaseCatalogError(f"Malformed asset in release {version}")

            name = asset["name"]
            if token not in name:
                continue

            digest = asset.get("digest") or ""
            sha256 = (
                digest[len(_DIGEST_PREFIX):].lower()
                if digest.startswith(_DIGEST_PREFIX)
                else None
            )
            result.builds.append(BuildInfo(version=version, sha256=sha256))
            result.releases[version] = name

    return result


def artifact_url(
    version: Version, artifact: str, base_url: str = DOWNLOAD_BASE_URL
) -> str:
    """
    Construct the download URL of an artifact.

    The artifact name is percent-encoded ('+' becomes '%2B'); names that
    are already encoded are not encoded twice.

    Example:
        >>> artifact_url(Version.parse("0.3.3"), "vyper.0.3.3+commit.48e326f0.darwin")
        'https://github.com/vyperlang/vyper/releases/download/v0.3.3/vyper.0.3.3%2Bcommit.48e326f0.darwin'
    """
    encoded = quote(unquote(artifact), safe="")
    return f"{base_url.rstrip('/')}/v{version}/{encoded}"


class ReleaseCatalog:
    """
    Read-only lookup of available versions for one platform.

    The release listing is fetched lazily once per catalog instance.

    Example:
        >>> catalog = ReleaseCatalog(detect_platform())
        >>> catalog.resolve_artifact(Version.parse("0.3.3"))
        'vyper.0.3.3+commit.48e326f0.linux'
    """

    def __init__(
        self,
        platform: Platform,
        releases_url: str = GITHUB_RELEASES,
        download_base_url: str = DOWNLOAD_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        token: Optional[str] = None,
    ):
        self.platform = platform
        self.releases_url = releases_url
        self.download_base_url = download_base_url
        self.session = session
        self.timeout = timeout
        self.token = token
        self._releases: Optional[Releases] = None

    def _headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_pages(self) -> Iterable[Any]:
        http = self.session or requests
        url: Optional[str] = self.releases_url

        while url:
            logger.debug(f"Fetching releases from {url}")
            try:
                response = http.get(url, headers=self._headers(), timeout=self.timeout)
            except Timeout as e:
                raise DownloadTimeoutError(url, f"timed out after {self.timeout}s") from e
            except RequestException as e:
                raise DownloadError(url, str(e)) from e

            if not 200 <= response.status_code < 300:
                raise UnsuccessfulResponseError(url, response.status_code)

            try:
                page = response.json()
            except ValueError as e:
                raise ReleaseCatalogError(f"Invalid JSON from {url}: {e}") from e

            if not isinstance(page, list):
                raise ReleaseCatalogError(
                    f"Expected a list of releases from {url}, got {type(page).__name__}"
                )
            yield from page

            url = response.links.get("next", {}).get("url")

    def fetch(self, refresh: bool = False) -> Releases:
        """
        Fetch and parse the release listing.

        Args:
            refresh: Ignore the result of a previous fetch

        Raises:
            UnsuccessfulResponseError: On a non-success HTTP status
            DownloadError: On transport failure
            ReleaseCatalogError: On a malformed response
        """
        if self._releases is None or refresh:
            self._releases = parse_releases(list(self._get_pages()), self.platform)
            logger.debug(
                f"Found {len(self._releases)} releases for platform {self.platform}"
            )
        return self._releases

    def all_versions(self) -> List[Version]:
        """Sorted list of versions available for this platform."""
        return self.fetch().versions()

    def resolve_artifact(self, version: Version) -> str:
        """
        Artifact name for a version.

        Raises:
            UnknownVersionError: If no artifact exists for (version, platform)
        """
        artifact = self.fetch().get_artifact(version)
        if artifact is None:
            raise UnknownVersionError(
                str(version), f"no artifact for platform {self.platform}"
            )
        return artifact

    def get_checksum(self, version: Version) -> Optional[str]:
        """Published SHA256 digest for a version, if any."""
        return self.fetch().get_checksum(version)

    def artifact_url(self, version: Version, artifact: str) -> str:
        return artifact_url(version, artifact, self.download_base_url)
