"""
GitHub REST access: list a directory and read a raw file.

Both calls are plain blocking ``requests`` calls, attempted once. The tree
builder runs them in worker threads.
"""

import logging
from dataclasses import dataclass
from urllib.parse import quote

import requests

from . import config
from .errors import FetchError, LeafFetchError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepoEntry:
    name: str
    path: str
    is_dir: bool


class GitHubSource:
    """Remote "list directory" + "read file" capability for one token."""

    def __init__(
        self,
        token: str | None = None,
        timeout: float = config.REQUEST_TIMEOUT,
        api_url: str = config.GITHUB_API,
        raw_url: str = config.GITHUB_RAW,
    ):
        self.token = token or None
        self.timeout = timeout
        self.api_url = api_url.rstrip("/")
        self.raw_url = raw_url.rstrip("/")

    def _headers(self, accept: str) -> dict[str, str]:
        h = {"Accept": accept, "User-Agent": config.USER_AGENT}
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    def list_directory(
        self, owner: str, repo: str, path: str = "", branch: str = "main"
    ) -> list[RepoEntry]:
        url = f"{self.api_url}/repos/{owner}/{repo}/contents/{quote(path)}"
        log.debug("GET %s (ref=%s)", url, branch)
        try:
            resp = requests.get(
                url,
                headers=self._headers("application/vnd.github.v3+json"),
                params={"ref": branch},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise FetchError(f"GitHub API unreachable for '{path or '/'}': {e}") from e

        if not resp.ok:
            raise FetchError(
                f"GitHub API error: {resp.status_code} {resp.reason}",
                status=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError(f"GitHub API returned invalid JSON for '{path or '/'}'") from e
        if not isinstance(data, list):
            # The contents endpoint answers with an object when path is a file
            raise FetchError(f"'{path}' is not a directory")

        # Submodules and symlinks are listed as files, like the web UI does
        try:
            return [
                RepoEntry(name=item["name"], path=item["path"], is_dir=item.get("type") == "dir")
                for item in data
            ]
        except (KeyError, TypeError) as e:
            raise FetchError(f"Unexpected GitHub listing for '{path or '/'}': {e!r}") from e

    def read_file(self, owner: str, repo: str, path: str, branch: str = "main") -> str:
        url = f"{self.raw_url}/{owner}/{repo}/{quote(branch)}/{quote(path)}"
        try:
            resp = requests.get(
                url,
                headers=self._headers("application/vnd.github.v3.raw"),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LeafFetchError(path, str(e)) from e

        if not resp.ok:
            raise LeafFetchError(path, f"{resp.status_code} {resp.reason}")
        return resp.text
