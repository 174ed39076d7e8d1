"""Test fixtures for readmegen.

GitHub API payload builders shared by unit and integration tests. Payloads
mirror the shape of the REST v3 responses readmegen consumes.
"""

import base64
import json
from typing import Any

OWNER = "alice"
REPO = "demo"


def encode_content(text: str, path: str) -> dict[str, Any]:
    """Build a contents-API record holding ``text`` base64-encoded."""
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
    }


def repo_record(**overrides: Any) -> dict[str, Any]:
    """Build a ``GET /repos/{owner}/{repo}`` record."""
    record: dict[str, Any] = {
        "name": REPO,
        "full_name": f"{OWNER}/{REPO}",
        "description": "A demo project",
        "homepage": "",
        "license": {"key": "mit", "name": "MIT License", "spdx_id": "MIT"},
        "topics": ["demo", "example"],
        "default_branch": "main",
        "stargazers_count": 42,
        "forks_count": 7,
        "watchers_count": 42,
        "open_issues_count": 3,
        "created_at": "2023-01-15T10:00:00Z",
        "updated_at": "2024-06-01T12:30:00Z",
        "pushed_at": "2024-06-01T12:30:00Z",
        "is_template": False,
        "archived": False,
        "has_issues": True,
        "has_wiki": False,
    }
    record.update(overrides)
    return record


def contents_listing(*names: str) -> list[dict[str, Any]]:
    """Build a top-level ``contents/`` listing."""
    return [
        {"name": name, "path": name, "type": "dir" if "." not in name else "file"}
        for name in names
    ]


def package_json(dependencies: dict[str, str], dev_dependencies: dict[str, str] | None = None) -> str:
    data: dict[str, Any] = {"name": REPO, "version": "1.0.0", "dependencies": dependencies}
    if dev_dependencies is not None:
        data["devDependencies"] = dev_dependencies
    return json.dumps(data)


def releases(count: int) -> list[dict[str, Any]]:
    return [
        {"name": f"Release {i}", "tag_name": f"v{i}.0.0", "published_at": "2024-01-01T00:00:00Z"}
        for i in range(count, 0, -1)
    ]


def contributors(count: int) -> list[dict[str, Any]]:
    return [
        {
            "login": f"user{i}",
            "contributions": 100 - i,
            "html_url": f"https://github.com/user{i}",
        }
        for i in range(1, count + 1)
    ]
