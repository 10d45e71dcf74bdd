"""生成したリリースノートを GitHub のドラフトリリースとして公開するモジュール。"""

import logging
import os
import uuid

from tagnotes.github_client import GitHubClient

logger = logging.getLogger(__name__)


def publish_release(client: GitHubClient, owner: str, repo: str, tag: str, body: str) -> dict:
    """タグのリリースを作成または更新する。

    既存リリースがあれば本文を更新し、無ければ新規作成する。
    いずれの場合もドラフトとして保存する。

    Returns:
        GitHub API が返したリリースの dict。

    Raises:
        requests.HTTPError: 404 以外のエラーを GitHub API が返した場合。
    """
    existing = client.get_release_by_tag(owner, repo, tag)

    if existing:
        release = client.update_release(owner, repo, existing["id"], body=body, name=tag, draft=True)
        logger.info("Updated existing release for %s.", tag)
    else:
        release = client.create_release(owner, repo, tag_name=tag, name=tag, body=body, draft=True)
        logger.info("Created draft release for %s.", tag)

    return release


def write_action_output(name: str, value: str) -> None:
    """GitHub Actions の出力ファイル（GITHUB_OUTPUT）に複数行の値を追記する。

    Actions 外で実行された場合（GITHUB_OUTPUT 未設定）は何もしない。
    """
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return

    # 本文中に現れない区切り文字列を使う
    delimiter = f"EOF_{uuid.uuid4().hex}"
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    logger.debug("Wrote action output %s (%d bytes)", name, len(value))
