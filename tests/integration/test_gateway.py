"""Integration tests for the GitHub gateway against a mocked GitHub API."""

from typing import Any

import httpx
import pytest

from readmegen.config import GitHubConfig
from readmegen.errors import InvalidUrlError, RepositoryLookupError
from readmegen.github.client import GitHubGateway, parse_repository_url
from tests.fixtures import (
    contents_listing,
    contributors,
    encode_content,
    package_json,
    releases,
    repo_record,
)

BASE = "/repos/alice/demo"


def github_routes(**overrides: Any) -> dict[str, Any]:
    """Default responses keyed by request path.

    A value may be a JSON payload or an ``httpx.Response``.
    """
    routes: dict[str, Any] = {
        BASE: repo_record(),
        f"{BASE}/languages": {"JavaScript": 1000, "Python": 200},
        f"{BASE}/contents/": contents_listing("package.json", "README.md", ".github/workflows"),
        f"{BASE}/releases": releases(2),
        f"{BASE}/contributors": contributors(2),
        f"{BASE}/branches/main/protection": {"enabled": True},
        f"{BASE}/contents/README.md": encode_content("# Demo", "README.md"),
        f"{BASE}/contents/package.json": encode_content(
            package_json({"react": "^18.0.0"}), "package.json"
        ),
    }
    routes.update(overrides)
    return routes


class FakeGitHub:
    """Records requests and serves canned responses."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        payload = self.routes.get(request.url.path)
        if payload is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(payload, httpx.Response):
            return payload
        return httpx.Response(200, json=payload)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def make_gateway(fake: FakeGitHub, token: str | None = "ghp-test") -> GitHubGateway:
    config = GitHubConfig(token=token)
    client = httpx.AsyncClient(
        base_url=config.api_base,
        transport=httpx.MockTransport(fake),
    )
    return GitHubGateway(config, client=client)


class TestParseRepositoryUrl:
    """Tests for URL parsing."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/alice/demo",
            "https://github.com/alice/demo.git",
            "github.com/alice/demo",
            "https://github.com/alice/demo/tree/main/src",
            "https://github.com/alice/demo?tab=readme",
            "  https://github.com/alice/demo  ",
        ],
    )
    def test_valid(self, url: str) -> None:
        assert parse_repository_url(url) == ("alice", "demo")

    @pytest.mark.parametrize(
        "url",
        ["https://gitlab.com/alice/demo", "https://github.com/alice", "not a url"],
    )
    def test_invalid(self, url: str) -> None:
        with pytest.raises(InvalidUrlError, match="Invalid GitHub URL"):
            parse_repository_url(url)

    @pytest.mark.parametrize("url", ["", "   "])
    def test_empty(self, url: str) -> None:
        with pytest.raises(InvalidUrlError, match="Please enter a GitHub URL"):
            parse_repository_url(url)


class TestFetchRepository:
    """Tests for full repository analysis over HTTP."""

    @pytest.mark.asyncio
    async def test_full_analysis(self) -> None:
        fake = FakeGitHub(github_routes())

        async with make_gateway(fake) as gateway:
            analysis = await gateway.fetch_repository("https://github.com/alice/demo.git")

        context = analysis.context
        assert context.full_name == "alice/demo"
        assert context.languages == ("JavaScript", "Python")
        assert context.frameworks == ("React",)
        assert context.dependencies == ("react",)
        assert context.has_cicd is True
        assert context.has_readme is True
        assert context.readme_content == "# Demo"
        assert [r.tag for r in context.releases] == ["v2.0.0", "v1.0.0"]
        assert [c.login for c in context.contributors] == ["user1", "user2"]
        assert analysis.has_branch_protection is True

    @pytest.mark.asyncio
    async def test_request_headers_and_limits(self) -> None:
        fake = FakeGitHub(github_routes())

        async with make_gateway(fake) as gateway:
            await gateway.fetch_repository("https://github.com/alice/demo")

        first = fake.requests[0]
        assert first.url.path == BASE
        by_path = {r.url.path: r for r in fake.requests}
        assert by_path[f"{BASE}/releases"].url.params["per_page"] == "5"
        assert by_path[f"{BASE}/contributors"].url.params["per_page"] == "10"

    @pytest.mark.asyncio
    async def test_gateway_built_headers(self) -> None:
        gateway = GitHubGateway(GitHubConfig(token="ghp-abc"))
        try:
            headers = gateway._client.headers
            assert headers["Authorization"] == "Bearer ghp-abc"
            assert headers["Accept"] == "application/vnd.github+json"
        finally:
            await gateway.aclose()

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        fake = FakeGitHub(github_routes(**{BASE: None}))

        async with make_gateway(fake) as gateway:
            with pytest.raises(RepositoryLookupError, match="Repository not found: alice/demo") as exc_info:
                await gateway.fetch_repository("https://github.com/alice/demo")

        assert exc_info.value.status_code == 404
        assert fake.paths() == [BASE]

    @pytest.mark.asyncio
    async def test_rate_limited(self) -> None:
        limited = httpx.Response(
            403,
            json={"message": "API rate limit exceeded"},
            headers={"x-ratelimit-remaining": "0"},
        )
        fake = FakeGitHub(github_routes(**{BASE: limited}))

        async with make_gateway(fake, token=None) as gateway:
            with pytest.raises(RepositoryLookupError, match="rate limit"):
                await gateway.fetch_repository("https://github.com/alice/demo")

    @pytest.mark.asyncio
    async def test_server_error_message(self) -> None:
        fake = FakeGitHub(github_routes(**{BASE: httpx.Response(500, json={"message": "Boom"})}))

        async with make_gateway(fake) as gateway:
            with pytest.raises(RepositoryLookupError, match="500.*Boom"):
                await gateway.fetch_repository("https://github.com/alice/demo")

    @pytest.mark.asyncio
    async def test_invalid_url_makes_no_request(self) -> None:
        fake = FakeGitHub(github_routes())

        async with make_gateway(fake) as gateway:
            with pytest.raises(InvalidUrlError):
                await gateway.fetch_repository("https://example.com/alice/demo")

        assert fake.requests == []

    @pytest.mark.asyncio
    async def test_secondary_failures_degrade(self) -> None:
        """Test failed secondary lookups fall back to empty values."""
        fake = FakeGitHub(
            github_routes(
                **{
                    f"{BASE}/releases": httpx.Response(500),
                    f"{BASE}/contributors": httpx.Response(403),
                    f"{BASE}/branches/main/protection": None,
                    f"{BASE}/languages": ["not", "a", "mapping"],
                    f"{BASE}/contents/README.md": None,
                }
            )
        )

        async with make_gateway(fake) as gateway:
            analysis = await gateway.fetch_repository("https://github.com/alice/demo")

        context = analysis.context
        assert context.releases == ()
        assert context.contributors == ()
        assert context.languages == ()
        assert context.has_readme is False
        assert context.frameworks == ("React",)
        assert analysis.has_branch_protection is False

    @pytest.mark.asyncio
    async def test_requirements_manifest(self) -> None:
        fake = FakeGitHub(
            github_routes(
                **{
                    f"{BASE}/contents/": contents_listing("requirements.txt", "manage.py"),
                    f"{BASE}/contents/requirements.txt": encode_content(
                        "Django>=4.2\nflask\n", "requirements.txt"
                    ),
                }
            )
        )

        async with make_gateway(fake) as gateway:
            analysis = await gateway.fetch_repository("https://github.com/alice/demo")

        assert analysis.context.dependencies == ("django", "flask")
        assert analysis.context.frameworks == ("Django", "Python", "Flask")

    @pytest.mark.asyncio
    async def test_protection_uses_default_branch(self) -> None:
        fake = FakeGitHub(github_routes(**{BASE: repo_record(default_branch="develop")}))

        async with make_gateway(fake) as gateway:
            await gateway.fetch_repository("https://github.com/alice/demo")

        assert f"{BASE}/branches/develop/protection" in fake.paths()

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self) -> None:
        fake = FakeGitHub(github_routes())
        gateway = make_gateway(fake)

        await gateway.aclose()

        assert gateway._client.is_closed is False
        await gateway._client.aclose()
