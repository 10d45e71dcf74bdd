"""
Shared fixtures for tagnotes tests.

FakeGitHubClient stands in for GitHubClient and records every call, so the
tests never touch the network.
"""

import pytest


def make_pr(number, title, state="closed", merged_at="2026-01-01T00:00:00Z"):
    return {"number": number, "title": title, "state": state, "merged_at": merged_at}


class FakeGitHubClient:
    def __init__(self):
        self.tags = []
        self.history = []
        self.default_branch = "main"
        self.commits = []
        self.prs_by_sha = {}
        self.release = None
        self.calls = []

    def get_repository(self, owner, repo):
        self.calls.append(("get_repository", owner, repo))
        return {"default_branch": self.default_branch}

    def list_tags(self, owner, repo):
        self.calls.append(("list_tags", owner, repo))
        return [{"name": name} for name in self.tags]

    def list_commits(self, owner, repo, branch, page, per_page=100):
        self.calls.append(("list_commits", branch, page, per_page))
        start = (page - 1) * per_page
        return [{"sha": sha} for sha in self.history[start:start + per_page]]

    def compare_commits(self, owner, repo, base, head):
        self.calls.append(("compare_commits", base, head))
        # GitHub's compare never includes the base commit itself
        shas = [sha for sha in self.commits if sha != base]
        return {"commits": [{"sha": sha} for sha in shas], "total_commits": len(shas)}

    def list_pull_requests_for_commit(self, owner, repo, commit_sha):
        self.calls.append(("list_pull_requests_for_commit", commit_sha))
        return self.prs_by_sha.get(commit_sha, [])

    def get_release_by_tag(self, owner, repo, tag):
        self.calls.append(("get_release_by_tag", tag))
        return self.release

    def create_release(self, owner, repo, tag_name, name, body, draft=True):
        self.calls.append(("create_release", tag_name, name, body, draft))
        return {"id": 1, "tag_name": tag_name, "body": body, "draft": draft}

    def update_release(self, owner, repo, release_id, body, name, draft=True):
        self.calls.append(("update_release", release_id, name, body, draft))
        return {"id": release_id, "body": body, "draft": draft}

    def called(self, method):
        return [call for call in self.calls if call[0] == method]


@pytest.fixture
def fake_client():
    return FakeGitHubClient()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep settings and action outputs from leaking in from the caller's environment."""
    for name in (
        "GITHUB_OUTPUT",
        "GITHUB_TOKEN",
        "GITHUB_REPOSITORY",
        "GITHUB_REF",
        "RELEASE_TAG",
        "DRY_RUN",
        "CATEGORY_MAP",
        "RELEASE_TEMPLATE",
        "EMPTY_MESSAGE",
        "HEADING_LEVEL",
        "BASE_REF",
        "HEAD_REF",
    ):
        monkeypatch.delenv(name, raising=False)
