"""
GitHub Integration Module

Provides the GitHub API gateway used by the triage services.
"""

from repotriage.integrations.github.client import GitHubGateway, PLATFORM_NAME, NOREPLY_EMAIL

__all__ = [
    "GitHubGateway",
    "PLATFORM_NAME",
    "NOREPLY_EMAIL",
]
