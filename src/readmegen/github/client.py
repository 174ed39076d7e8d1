"""GitHub REST API gateway.

The repository record is fetched first because the branch-protection lookup
needs its default branch. Every other lookup runs concurrently and falls back
to an empty default on failure; only the repository record is mandatory.
"""

import asyncio
import logging
import re
from typing import Any

import httpx

from readmegen import __version__
from readmegen.analyzers.facts import build_context, find_readme, select_manifest
from readmegen.analyzers.rules import MAX_CONTRIBUTORS, MAX_RELEASES
from readmegen.config import GitHubConfig
from readmegen.errors import InvalidUrlError, RepositoryLookupError
from readmegen.models.repository import RawRepositoryData, RepositoryAnalysis

logger = logging.getLogger(__name__)

_GITHUB_URL_RE = re.compile(r"github\.com/([^/\s?#]+)/([^/\s?#]+)")


def parse_repository_url(url: str) -> tuple[str, str]:
    """Extract ``(owner, repo)`` from a GitHub repository URL.

    Accepts ``github.com/owner/repo`` with or without a scheme, a trailing
    ``.git``, further path segments, a query string or a fragment.

    Raises:
        InvalidUrlError: If the URL does not contain ``github.com/owner/repo``
    """
    if not url or not url.strip():
        raise InvalidUrlError("Please enter a GitHub URL")

    match = _GITHUB_URL_RE.search(url.strip())
    if not match:
        raise InvalidUrlError(f"Invalid GitHub URL format: {url}")

    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        raise InvalidUrlError(f"Invalid GitHub URL format: {url}")

    return owner, repo


class GitHubGateway:
    """Fetches repository metadata from the GitHub API.

    Usage:
        async with GitHubGateway(config) as gateway:
            analysis = await gateway.fetch_repository("https://github.com/owner/repo")
    """

    def __init__(
        self,
        config: GitHubConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            config: GitHub settings (token, API base, timeout)
            client: Pre-built HTTP client (the gateway will not close it)
        """
        self.config = config or GitHubConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.config.api_base,
            headers=self._headers(),
            timeout=self.config.timeout,
            follow_redirects=True,
        )
        if not self.config.token:
            logger.warning(
                "No GitHub token provided. Using unauthenticated requests with lower rate limits."
            )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"readmegen/{__version__}",
        }
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    async def __aenter__(self) -> "GitHubGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # -- requests ------------------------------------------------------------

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def _optional(
        self,
        label: str,
        path: str,
        default: Any,
        expected: type,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET a secondary resource, returning ``default`` on any failure."""
        try:
            data = await self._get(path, params)
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Lookup '%s' failed, using default: %s", label, e)
            return default
        if not isinstance(data, expected):
            logger.debug("Lookup '%s' returned unexpected payload, using default", label)
            return default
        return data

    async def fetch_repository_record(self, owner: str, repo: str) -> dict[str, Any]:
        """Fetch the mandatory repository record.

        Raises:
            RepositoryLookupError: On any HTTP or transport failure
        """
        try:
            data = await self._get(f"/repos/{owner}/{repo}")
        except httpx.HTTPStatusError as e:
            raise _lookup_error(owner, repo, e.response) from e
        except httpx.HTTPError as e:
            raise RepositoryLookupError(f"Could not reach GitHub: {e}") from e
        except ValueError as e:
            raise RepositoryLookupError(f"Malformed response for {owner}/{repo}: {e}") from e

        if not isinstance(data, dict):
            raise RepositoryLookupError(f"Malformed response for {owner}/{repo}")
        return data

    async def fetch_raw(self, owner: str, repo: str) -> RawRepositoryData:
        """Fetch every payload the fact extractor needs.

        Raises:
            RepositoryLookupError: If the repository record cannot be fetched
        """
        record = await self.fetch_repository_record(owner, repo)
        base = f"/repos/{owner}/{repo}"
        branch = record.get("default_branch") or "main"

        languages, contents, releases, contributors, protection = await asyncio.gather(
            self._optional("languages", f"{base}/languages", {}, dict),
            self._optional("contents", f"{base}/contents/", [], list),
            self._optional(
                "releases", f"{base}/releases", [], list, params={"per_page": MAX_RELEASES}
            ),
            self._optional(
                "contributors",
                f"{base}/contributors",
                [],
                list,
                params={"per_page": MAX_CONTRIBUTORS},
            ),
            self._optional(
                "branch protection", f"{base}/branches/{branch}/protection", None, dict
            ),
        )

        readme_path = find_readme(contents)
        manifest_path = select_manifest(entry.get("name", "") for entry in contents)

        readme, manifest = await asyncio.gather(
            self._fetch_content(base, readme_path),
            self._fetch_content(base, manifest_path),
        )

        logger.debug(
            "Fetched %s/%s: %d entries, %d releases, %d contributors, readme=%s, manifest=%s",
            owner,
            repo,
            len(contents),
            len(releases),
            len(contributors),
            readme is not None,
            manifest_path if manifest is not None else None,
        )

        return RawRepositoryData(
            owner=owner,
            repo=record,
            languages=languages,
            contents=contents,
            releases=releases,
            contributors=contributors,
            branch_protection=protection,
            readme=readme,
            manifest_path=manifest_path if manifest is not None else None,
            manifest=manifest,
        )

    async def _fetch_content(self, base: str, path: str | None) -> dict[str, Any] | None:
        if not path:
            return None
        return await self._optional(f"content {path}", f"{base}/contents/{path}", None, dict)

    async def fetch_repository(self, url: str) -> RepositoryAnalysis:
        """Analyze the repository at ``url``.

        Raises:
            InvalidUrlError: If the URL is not a GitHub repository URL
            RepositoryLookupError: If the repository record cannot be fetched
        """
        owner, repo = parse_repository_url(url)
        logger.info("Fetching repository %s/%s", owner, repo)

        raw = await self.fetch_raw(owner, repo)
        context = build_context(raw)
        return RepositoryAnalysis(
            context=context,
            has_branch_protection=raw.branch_protection is not None,
        )


def _lookup_error(owner: str, repo: str, response: httpx.Response) -> RepositoryLookupError:
    status = response.status_code
    message = _error_message(response)

    if status == 404:
        return RepositoryLookupError(f"Repository not found: {owner}/{repo}", status)
    if status in (403, 429) and response.headers.get("x-ratelimit-remaining") == "0":
        return RepositoryLookupError(
            "GitHub API rate limit exceeded. Set GITHUB_TOKEN to raise the limit.", status
        )
    return RepositoryLookupError(f"GitHub API error {status} for {owner}/{repo}: {message}", status)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.reason_phrase
