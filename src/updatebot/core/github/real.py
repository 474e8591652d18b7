"""Production implementation of GitHub operations using the gh CLI."""

import json
import subprocess
from datetime import datetime
from typing import Any
from urllib.parse import quote

from updatebot.core.github.abc import GitHub
from updatebot.core.github.types import CreateIssueResult, IssueComment, IssueInfo
from updatebot.core.subprocess import execute_gh_command
from updatebot.model.repositories import GithubRepository

REPOSITORY_FIELDS = "name,owner,url,visibility,defaultBranchRef"


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _parse_json_lines(stdout: str) -> list[dict[str, Any]]:
    """Parse `gh api --paginate --jq '.[]'` output: one JSON object per line."""
    return [json.loads(line) for line in stdout.splitlines() if line.strip()]


def parse_repository(data: dict[str, Any]) -> GithubRepository:
    """Convert `gh repo list/view --json` output into a GithubRepository."""
    url = data["url"]
    default_branch = (data.get("defaultBranchRef") or {}).get("name") or None
    visibility = data.get("visibility")
    return GithubRepository(
        name=data["name"],
        clone_url=f"{url}.git",
        owner=data["owner"]["login"],
        visibility=visibility.lower() if visibility else None,
        html_url=url,
        github_default_branch=default_branch,
    )


def parse_issue(data: dict[str, Any]) -> IssueInfo:
    """Convert a REST issue object into IssueInfo."""
    return IssueInfo(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        state=str(data.get("state", "open")).upper(),
        url=data.get("html_url", ""),
        labels=[label["name"] for label in data.get("labels", [])],
        is_pull_request="pull_request" in data,
    )


def parse_comment(data: dict[str, Any]) -> IssueComment:
    """Convert a REST issue comment object into IssueComment."""
    user = data.get("user")
    return IssueComment(
        author=user.get("login") if user else None,
        body=data.get("body") or "",
        created_at=_parse_timestamp(data["created_at"]),
    )


class RealGitHub(GitHub):
    """Production implementation using gh CLI.

    Authentication and transport are entirely gh's business. Failures surface
    as RuntimeError from execute_gh_command.
    """

    def list_repositories(self, owner: str) -> list[GithubRepository]:
        cmd = ["gh", "repo", "list", owner, "--limit", "10000", "--json", REPOSITORY_FIELDS]
        data = json.loads(execute_gh_command(cmd))
        return [parse_repository(repo) for repo in data]

    def get_repository(self, owner: str, name: str) -> GithubRepository:
        cmd = ["gh", "repo", "view", f"{owner}/{name}", "--json", REPOSITORY_FIELDS]
        return parse_repository(json.loads(execute_gh_command(cmd)))

    def list_open_issues(self, repo: str, label: str) -> list[IssueInfo]:
        cmd = [
            "gh",
            "api",
            "--paginate",
            f"repos/{repo}/issues?state=open&labels={quote(label)}&per_page=100",
            "--jq",
            ".[]",
        ]
        return [parse_issue(issue) for issue in _parse_json_lines(execute_gh_command(cmd))]

    def create_issue(
        self, repo: str, title: str, body: str, labels: list[str]
    ) -> CreateIssueResult:
        cmd = ["gh", "issue", "create", "--repo", repo, "--title", title, "--body", body]
        for label in labels:
            cmd.extend(["--label", label])

        # gh issue create prints a URL like: https://github.com/owner/repo/issues/123
        url = execute_gh_command(cmd).strip()
        number = int(url.rstrip("/").split("/")[-1])
        return CreateIssueResult(number=number, url=url)

    def add_comment(self, repo: str, number: int, body: str) -> None:
        cmd = ["gh", "issue", "comment", str(number), "--repo", repo, "--body", body]
        execute_gh_command(cmd)

    def get_issue_comments(self, repo: str, number: int) -> list[IssueComment]:
        cmd = [
            "gh",
            "api",
            "--paginate",
            f"repos/{repo}/issues/{number}/comments?per_page=100",
            "--jq",
            ".[]",
        ]
        comments = [parse_comment(c) for c in _parse_json_lines(execute_gh_command(cmd))]
        return sorted(comments, key=lambda c: c.created_at)

    def close_issue(self, repo: str, number: int) -> None:
        cmd = ["gh", "issue", "close", str(number), "--repo", repo]
        execute_gh_command(cmd)

    def get_current_username(self) -> str | None:
        try:
            result = subprocess.run(
                ["gh", "api", "user", "--jq", ".login"],
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None
