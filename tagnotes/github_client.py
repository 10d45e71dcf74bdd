"""リリースノート生成に必要な GitHub REST API クライアント。

タグ・コミット・PR の参照と、ドラフトリリースの作成・更新のみを扱う。

既知の制約:
    タグの並び順は API の返す順序（新しい順）をそのまま信用する。
    セマンティックバージョンでの並び替えは行わない。
"""

import logging
from typing import Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"
PAGE_SIZE = 100
REQUEST_TIMEOUT = 30


class GitHubClient:
    """GitHub REST API の薄いラッパー。

    Args:
        token: GitHub トークン。None の場合は未認証でリクエストする。
        api_base: API のベース URL（GitHub Enterprise 用）。
    """

    def __init__(self, token: Optional[str] = None, api_base: str = API_BASE):
        self.api_base = api_base.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update(self._get_headers(token))

    @staticmethod
    def _get_headers(token: Optional[str]) -> dict:
        """リクエストヘッダーを構築する。"""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.api_base}{path}"
        response = self.session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    def _get_json(self, path: str, params: Optional[dict] = None):
        response = self._request("GET", path, params=params)
        response.raise_for_status()
        return response.json()

    def get_repository(self, owner: str, repo: str) -> dict:
        """リポジトリ情報（default_branch 等）を取得する。"""
        return self._get_json(f"/repos/{owner}/{repo}")

    def list_tags(self, owner: str, repo: str) -> list[dict]:
        """全ページを辿ってタグ一覧を取得する。

        戻り値は API の返す順序（新しい順）の ``{"name": ...}`` dict のリスト。
        """
        tags: list[dict] = []
        page = 1
        while True:
            batch = self._get_json(
                f"/repos/{owner}/{repo}/tags",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            tags.extend(batch)
            if len(batch) < PAGE_SIZE:
                break
            page += 1

        logger.info("Fetched %d tag(s) from %s/%s", len(tags), owner, repo)
        return tags

    def list_commits(self, owner: str, repo: str, branch: str, page: int, per_page: int = PAGE_SIZE) -> list[dict]:
        """ブランチのコミット履歴を 1 ページ分取得する（新しい順）。"""
        return self._get_json(
            f"/repos/{owner}/{repo}/commits",
            params={"sha": branch, "per_page": per_page, "page": page},
        )

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> dict:
        """``base...head`` 間のコミットを全ページ分取得する。

        GitHub の比較 API の仕様上、base 自身のコミットは含まれない。

        Returns:
            ``{"commits": [...], "total_commits": int}`` 形式の dict。
        """
        path = f"/repos/{owner}/{repo}/compare/{quote(base, safe='')}...{quote(head, safe='')}"
        commits: list[dict] = []
        total = 0
        page = 1
        while True:
            data = self._get_json(path, params={"per_page": PAGE_SIZE, "page": page})
            batch = data.get("commits", [])
            total = data.get("total_commits", len(batch))
            commits.extend(batch)
            if not batch or len(commits) >= total:
                break
            page += 1

        logger.info("Compared %s...%s: %d commit(s)", base, head, len(commits))
        return {"commits": commits, "total_commits": total}

    def list_pull_requests_for_commit(self, owner: str, repo: str, commit_sha: str) -> list[dict]:
        """コミットに関連付けられた PR を全ページ分取得する。"""
        prs: list[dict] = []
        page = 1
        while True:
            batch = self._get_json(
                f"/repos/{owner}/{repo}/commits/{commit_sha}/pulls",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            prs.extend(batch)
            if len(batch) < PAGE_SIZE:
                break
            page += 1
        return prs

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> dict | None:
        """タグに対応するリリースを取得する。見つからなければ None。"""
        response = self._request("GET", f"/repos/{owner}/{repo}/releases/tags/{quote(tag, safe='')}")
        if response.status_code == 404:
            logger.info("Release not found: %s", tag)
            return None
        response.raise_for_status()
        return response.json()

    def create_release(self, owner: str, repo: str, tag_name: str, name: str, body: str, draft: bool = True) -> dict:
        """リリースを新規作成する。"""
        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/releases",
            json={"tag_name": tag_name, "name": name, "body": body, "draft": draft},
        )
        response.raise_for_status()
        return response.json()

    def update_release(self, owner: str, repo: str, release_id: int, body: str, name: str, draft: bool = True) -> dict:
        """既存リリースの本文・名前・ドラフト状態を更新する。"""
        response = self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/releases/{release_id}",
            json={"body": body, "name": name, "draft": draft},
        )
        response.raise_for_status()
        return response.json()
