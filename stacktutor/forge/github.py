# =============================================================
# Push generated files to a GitHub branch as one commit.
# -------------------------------------------------------------
# Git Data API flow:
#   1) read the branch ref -> latest commit sha
#   2) read that commit     -> base tree sha
#   3) create one blob per file
#   4) create a tree on top of the base tree
#   5) create a commit with the latest commit as parent
#   6) move the branch ref to the new commit
# =============================================================

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

import requests

from stacktutor.log import get_logger

from .types import GeneratedFile

logger = get_logger("forge.github")

GITHUB_API_BASE = "https://api.github.com"
_REPO_URL = re.compile(r"github\.com[/:]([^/]+)/([^/.]+)(\.git)?")


class GitHubError(Exception):
    """GitHub answered with a non-2xx status."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        super().__init__(f"GitHub API Error ({status}): {message}")


def parse_repo_url(url: str) -> Tuple[str, str]:
    m = _REPO_URL.search(url or "")
    if not m:
        raise ValueError("Invalid GitHub repository URL.")
    return m.group(1), m.group(2)


class GitHubPusher:
    def __init__(self, token: str, session: Optional[requests.Session] = None, timeout: int = 30):
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resp = self.session.request(
            method,
            f"{GITHUB_API_BASE}{endpoint}",
            json=body,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github.v3+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=self.timeout,
        )
        if not resp.ok:
            try:
                message = resp.json().get("message") or "Unknown error"
            except ValueError:
                message = "Unknown error"
            raise GitHubError(resp.status_code, message)
        return resp.json()

    def push(self, repo_url: str, files: List[GeneratedFile], commit_message: str, branch: str = "main") -> str:
        """Commit `files` on top of `branch`; returns the new commit sha."""
        if not files:
            raise ValueError("Nothing to push: no files.")
        owner, repo = parse_repo_url(repo_url)
        base = f"/repos/{owner}/{repo}/git"

        latest_sha = self._request("GET", f"{base}/refs/heads/{branch}")["object"]["sha"]
        base_tree = self._request("GET", f"{base}/commits/{latest_sha}")["tree"]["sha"]

        tree_items = []
        for f in files:
            blob = self._request("POST", f"{base}/blobs", {"content": f.code, "encoding": "utf-8"})
            tree_items.append({"path": f.file_path, "mode": "100644", "type": "blob", "sha": blob["sha"]})

        tree_sha = self._request("POST", f"{base}/trees", {"base_tree": base_tree, "tree": tree_items})["sha"]
        commit_sha = self._request(
            "POST", f"{base}/commits",
            {"message": commit_message, "tree": tree_sha, "parents": [latest_sha]},
        )["sha"]
        self._request("PATCH", f"{base}/refs/heads/{branch}", {"sha": commit_sha})

        logger.info("pushed %d files to %s/%s@%s (%s)", len(files), owner, repo, branch, commit_sha[:7])
        return commit_sha
