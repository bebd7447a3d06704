# ===============================================
# tests/test_github.py
# GitHub push flow against a fake requests session.
# ===============================================

import pytest

from stacktutor.forge import GeneratedFile
from stacktutor.forge.github import GITHUB_API_BASE, GitHubError, GitHubPusher, parse_repo_url


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload or {}

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on
        self._blobs = 0

    def request(self, method, url, json=None, headers=None, timeout=None):
        path = url[len(GITHUB_API_BASE):]
        self.calls.append((method, path, json, headers))
        if self.fail_on and self.fail_on == (method, path):
            return FakeResponse(404, {"message": "Not Found"})
        if method == "GET" and "/git/refs/heads/" in path:
            return FakeResponse(payload={"object": {"sha": "c0ffee"}})
        if method == "GET" and "/git/commits/" in path:
            return FakeResponse(payload={"tree": {"sha": "tree0"}})
        if path.endswith("/git/blobs"):
            self._blobs += 1
            return FakeResponse(201, {"sha": f"blob{self._blobs}"})
        if path.endswith("/git/trees"):
            return FakeResponse(201, {"sha": "tree1"})
        if path.endswith("/git/commits"):
            return FakeResponse(201, {"sha": "commit1234567"})
        if method == "PATCH":
            return FakeResponse(payload={"object": {"sha": "commit1234567"}})
        raise AssertionError(f"unexpected call {method} {path}")


FILES = [GeneratedFile("package.json", "{}"), GeneratedFile("src/server.js", "app.listen()")]


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://github.com/octo/blog-api", ("octo", "blog-api")),
        ("https://github.com/octo/blog-api.git", ("octo", "blog-api")),
        ("git@github.com:octo/blog", ("octo", "blog")),
    ],
)
def test_parse_repo_url(url, expected):
    assert parse_repo_url(url) == expected


@pytest.mark.parametrize("url", ["https://gitlab.com/octo/blog", "", "github.com"])
def test_parse_repo_url_rejects(url):
    with pytest.raises(ValueError, match="Invalid GitHub repository URL."):
        parse_repo_url(url)


def test_push_runs_git_data_flow_in_order():
    session = FakeSession()
    sha = GitHubPusher("tok", session=session).push("https://github.com/octo/blog", FILES, "init", "dev")

    assert sha == "commit1234567"
    assert [(m, p) for m, p, _, _ in session.calls] == [
        ("GET", "/repos/octo/blog/git/refs/heads/dev"),
        ("GET", "/repos/octo/blog/git/commits/c0ffee"),
        ("POST", "/repos/octo/blog/git/blobs"),
        ("POST", "/repos/octo/blog/git/blobs"),
        ("POST", "/repos/octo/blog/git/trees"),
        ("POST", "/repos/octo/blog/git/commits"),
        ("PATCH", "/repos/octo/blog/git/refs/heads/dev"),
    ]
    tree_body = session.calls[4][2]
    assert tree_body["base_tree"] == "tree0"
    assert [t["path"] for t in tree_body["tree"]] == ["package.json", "src/server.js"]
    assert [t["sha"] for t in tree_body["tree"]] == ["blob1", "blob2"]
    commit_body = session.calls[5][2]
    assert commit_body == {"message": "init", "tree": "tree1", "parents": ["c0ffee"]}
    assert session.calls[6][2] == {"sha": "commit1234567"}
    assert session.calls[0][3]["Authorization"] == "Bearer tok"


def test_push_surfaces_api_errors():
    session = FakeSession(fail_on=("GET", "/repos/octo/blog/git/refs/heads/main"))
    with pytest.raises(GitHubError) as exc:
        GitHubPusher("tok", session=session).push("https://github.com/octo/blog", FILES, "init")
    assert exc.value.status == 404
    assert str(exc.value) == "GitHub API Error (404): Not Found"


def test_push_requires_files():
    with pytest.raises(ValueError):
        GitHubPusher("tok", session=FakeSession()).push("https://github.com/octo/blog", [], "init")
