"""GitHub API access."""

from readmegen.github.client import GitHubGateway, parse_repository_url

__all__ = ["GitHubGateway", "parse_repository_url"]
