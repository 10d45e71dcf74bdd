"""比較範囲内のマージ済み PR を収集し、カテゴリ別にまとめるモジュール。"""

import logging

from tagnotes.categories import CategoryMap
from tagnotes.classifier import CategorizedEntry, parse_title
from tagnotes.github_client import GitHubClient

logger = logging.getLogger(__name__)

Categorized = dict[str, list[CategorizedEntry]]


def _is_merged(pr: dict) -> bool:
    return pr.get("state") == "closed" and pr.get("merged_at") is not None


def collect_categorized_prs(
    client: GitHubClient,
    owner: str,
    repo: str,
    base: str,
    head: str,
    category_map: CategoryMap,
    include_base: bool = False,
) -> Categorized:
    """base...head 間のコミットに紐づくマージ済み PR をカテゴリ別に集計する。

    PR はコミット順・関連付け順に 1 件ずつ取得し、同じ PR 番号は
    最初に現れたものだけを採用する（複数コミットにまたがる PR の重複除去）。
    タイトルが Conventional Commits 形式でない PR はログに残して除外する。

    Args:
        include_base: True の場合、比較結果に含まれない base 自身も
            最古のコミットとして先頭に加える（初回リリースのルートコミット用）。

    Returns:
        カテゴリ名 → CategorizedEntry のリスト。並び順は保証しない。
    """
    comparison = client.compare_commits(owner, repo, base, head)

    shas = [commit["sha"] for commit in comparison["commits"]]
    if include_base and base not in shas:
        shas.insert(0, base)

    seen_prs: set[int] = set()
    categorized: Categorized = {}

    for sha in shas:
        prs = client.list_pull_requests_for_commit(owner, repo, sha)

        for pr in prs:
            if not _is_merged(pr):
                continue
            number = pr["number"]
            if number in seen_prs:
                continue
            seen_prs.add(number)

            parsed = parse_title(pr["title"], category_map)
            if parsed is None:
                logger.info("Skipping non-conformant PR title: #%d %s", number, pr["title"])
                continue

            entry = CategorizedEntry(category=parsed.category, summary=parsed.summary, pr=number)
            categorized.setdefault(entry.category, []).append(entry)

    logger.info(
        "Collected %d PR(s) in %d categor%s",
        sum(len(entries) for entries in categorized.values()),
        len(categorized),
        "y" if len(categorized) == 1 else "ies",
    )
    return categorized
