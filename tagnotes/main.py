"""タグ付きリビジョンのリリースノートを生成するメインエントリーポイント。"""

import argparse
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from tagnotes.aggregator import collect_categorized_prs
from tagnotes.categories import build_category_map
from tagnotes.config import Settings, load_settings, parse_repository, resolve_tag
from tagnotes.github_client import GitHubClient
from tagnotes.publisher import publish_release, write_action_output
from tagnotes.ranges import resolve_range
from tagnotes.renderer import RenderOptions, render_body

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def generate_release_notes(settings: Settings, client: Optional[GitHubClient] = None) -> str:
    """リリースノート本文を生成し、dry-run でなければドラフトリリースに反映する。

    ネットワークアクセスの前に設定（カテゴリマップ・タグ・リポジトリ）を検証する。

    Args:
        settings: 実行設定。
        client: GitHub クライアント。None の場合は settings.token から生成する。

    Returns:
        生成したリリースノート本文。
    """
    category_map = build_category_map(settings.category_map)
    tag = resolve_tag(settings.tag, settings.ref)
    owner, repo = parse_repository(settings.repository)

    if client is None:
        client = GitHubClient(token=settings.token)

    revision_range = resolve_range(client, owner, repo, tag, base=settings.base, head=settings.head)
    logger.info("Comparing %s...%s", revision_range.base, revision_range.head)

    categorized = collect_categorized_prs(
        client,
        owner,
        repo,
        revision_range.base,
        revision_range.head,
        category_map,
        include_base=revision_range.include_base,
    )
    body = render_body(
        categorized,
        RenderOptions(
            heading_level=settings.heading_level,
            empty_message=settings.empty_message,
            template=settings.template,
            tag=tag,
            previous_tag=revision_range.previous_tag,
        ),
    )

    write_action_output("release-body", body)

    if settings.dry_run:
        logger.info("Dry run enabled; not creating or updating a release.")
        return body

    publish_release(client, owner, repo, tag, body)
    return body


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PR タイトルからカテゴリ別のリリースノートを生成する")
    parser.add_argument("--repository", type=str, default=None, help="対象リポジトリ（owner/repo）")
    parser.add_argument("--token", type=str, default=None, help="GitHub トークン（既定: GITHUB_TOKEN）")
    parser.add_argument("--tag", type=str, default=None, help="対象タグ（既定: GITHUB_REF から導出）")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="リリースを作成・更新せず本文を標準出力に表示する",
    )
    parser.add_argument(
        "--category-map",
        type=str,
        default=None,
        help='type → カテゴリ名の上書き（JSON。例: \'{"perf": "Performance"}\'）',
    )
    parser.add_argument("--template", type=str, default=None, help="本文テンプレート（既定: {{sections}}）")
    parser.add_argument("--empty-message", type=str, default=None, help="該当 PR が無い場合のメッセージ")
    parser.add_argument("--heading-level", type=int, default=None, help="カテゴリ見出しのレベル（既定: 2）")
    parser.add_argument("--base", type=str, default=None, help="比較の起点を明示指定する")
    parser.add_argument("--head", type=str, default=None, help="比較の終点を明示指定する")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
        body = generate_release_notes(settings)
    except Exception as e:
        logger.error("Release notes generation failed: %s", e)
        sys.exit(1)

    if settings.dry_run:
        print(body)

    logger.info("Done")


if __name__ == "__main__":
    main()
