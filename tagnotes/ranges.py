"""比較対象となるリビジョン範囲（base / head）を決定するモジュール。"""

import logging
from dataclasses import dataclass
from typing import Optional

from tagnotes.github_client import PAGE_SIZE, GitHubClient

logger = logging.getLogger(__name__)


class EmptyHistoryError(RuntimeError):
    """ブランチにコミットが 1 件も無く、比較の起点を決められない場合に送出される。"""


@dataclass(frozen=True)
class RevisionRange:
    """比較に使う base / head と、テンプレート用の前回タグ。

    GitHub の比較 API は base 自身を含まないため、初回リリースで base が
    ルートコミットの場合は include_base を立てて base も集計対象にする。
    """

    base: str
    head: str
    previous_tag: Optional[str] = None
    include_base: bool = False


def find_previous_tag(client: GitHubClient, owner: str, repo: str, current_tag: str) -> Optional[str]:
    """current_tag の直前のタグを返す。

    タグ一覧は API の返す順序（新しい順）をそのまま使い、一覧上で
    current_tag の次に並ぶタグを「前回のタグ」とみなす。

    Returns:
        前回のタグ名。current_tag が一覧に無い、または最古のタグの場合は None。
    """
    names = [tag["name"] for tag in client.list_tags(owner, repo)]
    try:
        index = names.index(current_tag)
    except ValueError:
        logger.warning("Tag %s not found in tag list", current_tag)
        return None

    if index + 1 < len(names):
        return names[index + 1]
    return None


def find_branch_root(client: GitHubClient, owner: str, repo: str, branch: str) -> str:
    """ブランチの履歴をページ単位で遡り、最古（ルート）のコミット SHA を返す。

    GitHub API にはルートコミットを直接取得する手段が無いため、
    先頭から全ページを走査する。各ページは新しい順なので末尾が
    そのページ内で最も古いコミットになる。

    Raises:
        EmptyHistoryError: ブランチにコミットが存在しない場合。
    """
    root: Optional[str] = None
    page = 1
    while True:
        commits = client.list_commits(owner, repo, branch, page=page, per_page=PAGE_SIZE)
        if not commits:
            break
        root = commits[-1]["sha"]
        if len(commits) < PAGE_SIZE:
            break
        page += 1

    if root is None:
        raise EmptyHistoryError(f"Branch {branch} of {owner}/{repo} has no commits")

    logger.info("Root commit of %s: %s (scanned %d page(s))", branch, root, page)
    return root


def resolve_range(
    client: GitHubClient,
    owner: str,
    repo: str,
    tag: str,
    base: Optional[str] = None,
    head: Optional[str] = None,
) -> RevisionRange:
    """タグと明示指定から比較範囲を決定する。

    base の優先順位: 明示指定 > 前回のタグ > デフォルトブランチのルートコミット。
    head は明示指定が無ければ tag そのもの。
    """
    previous_tag = find_previous_tag(client, owner, repo, tag)
    logger.info("Current tag: %s", tag)
    logger.info("Previous tag: %s", previous_tag or "none (initial release)")

    include_base = False
    if not base:
        if previous_tag:
            base = previous_tag
        else:
            default_branch = client.get_repository(owner, repo)["default_branch"]
            base = find_branch_root(client, owner, repo, default_branch)
            include_base = True

    return RevisionRange(base=base, head=head or tag, previous_tag=previous_tag, include_base=include_base)
