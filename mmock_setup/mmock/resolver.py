"""
Version resolution for mmock.

Turns the requested version spec into a concrete, prefix-free version:

    >>> normalize_version("V3.0.2")
    '3.0.2'
    >>> VersionResolver().resolve("3.1.6")
    '3.1.6'

The literal 'latest' (any casing) is resolved against the latest published
GitHub release of jmartin82/mmock. A failed lookup is not retried.
"""

import logging
from typing import Optional

import requests
from requests.exceptions import RequestException

from mmock_setup.core.exceptions import ResolutionError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
MMOCK_OWNER = "jmartin82"
MMOCK_REPO = "mmock"

LATEST = "latest"


def normalize_version(spec: str) -> str:
    """
    Strip one leading 'v' or 'V' from a version spec.

    The rest of the string is returned unchanged; version syntax is not
    validated here.
    """
    if spec[:1] in ("v", "V"):
        return spec[1:]
    return spec


def is_latest(spec: str) -> bool:
    """True if the (normalized) spec asks for the latest release."""
    return normalize_version(spec).lower() == LATEST


class GitHubReleaseClient:
    """
    Minimal client for the GitHub "latest release" endpoint.

    Example:
        >>> client = GitHubReleaseClient(token="ghp_...")
        >>> client.get_latest_tag("jmartin82", "mmock")
        'v4.2.0'
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = GITHUB_API_URL,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, token: Optional[str] = None) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        token = token or self.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def get_latest_tag(self, owner: str, repo: str, token: Optional[str] = None) -> str:
        """
        Get the tag name of the latest published release.

        Args:
            owner: Repository owner
            repo: Repository name
            token: Token for this request (default: the client's token)

        Raises:
            ResolutionError: On network/authentication errors or when the
                repository has no published release
        """
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/latest"

        try:
            response = self.session.get(
                url, headers=self._headers(token), timeout=self.timeout
            )
        except RequestException as e:
            raise ResolutionError(f"Failed to query latest release of {owner}/{repo}: {e}") from e

        if response.status_code == 404:
            raise ResolutionError(f"No published releases found for {owner}/{repo}")
        if response.status_code in (401, 403):
            raise ResolutionError(
                f"GitHub API refused the request ({response.status_code}): {response.text}"
            )
        if not response.ok:
            raise ResolutionError(
                f"GitHub API request failed ({response.status_code}): {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ResolutionError(f"Invalid JSON from GitHub API: {e}") from e

        tag = payload.get("tag_name") if isinstance(payload, dict) else None
        if not tag:
            raise ResolutionError(f"Latest release of {owner}/{repo} has no tag name")

        return str(tag)


class VersionResolver:
    """Resolve raw version specs into concrete mmock versions."""

    def __init__(self, client: Optional[GitHubReleaseClient] = None):
        self.client = client

    def resolve(self, raw_spec: str, auth_token: Optional[str] = None) -> str:
        """
        Resolve a version spec.

        Args:
            raw_spec: 'latest' or an explicit version, optionally 'v'-prefixed
            auth_token: GitHub token used only when resolving 'latest'; it is
                handed to the release client on every lookup

        Returns:
            Concrete version without prefix (e.g. '3.1.6')

        Raises:
            ResolutionError: If 'latest' cannot be resolved
        """
        version = normalize_version(raw_spec)

        if not is_latest(raw_spec):
            return version

        logger.debug("Requesting latest MMock version...")
        client = self.client or GitHubReleaseClient()
        latest = normalize_version(
            client.get_latest_tag(MMOCK_OWNER, MMOCK_REPO, token=auth_token)
        )
        logger.debug(f"Latest version: {latest}")

        if not latest:
            raise ResolutionError("Latest release tag is empty")

        return latest
