"""コマンドライン引数と環境変数から実行設定を組み立てるモジュール。

コマンドライン引数が優先され、未指定の項目は環境変数（.env を含む）から読み込む。
"""

import argparse
import logging
import os
from dataclasses import dataclass
from typing import Optional

from tagnotes.categories import InvalidConfiguration
from tagnotes.renderer import DEFAULT_EMPTY_MESSAGE, DEFAULT_TEMPLATE

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class MissingInputError(RuntimeError):
    """処理対象のタグやリポジトリが特定できない場合に送出される。"""


@dataclass
class Settings:
    """1 回の実行に必要な設定値。"""

    repository: Optional[str] = None
    token: Optional[str] = None
    tag: Optional[str] = None
    ref: Optional[str] = None
    dry_run: bool = False
    category_map: Optional[str] = None
    template: str = DEFAULT_TEMPLATE
    empty_message: str = DEFAULT_EMPTY_MESSAGE
    heading_level: int = 2
    base: Optional[str] = None
    head: Optional[str] = None


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    return value if value else None


def _parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES


def _parse_heading_level(value) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"heading-level must be an integer, got {value!r}") from e
    if level < 1:
        raise InvalidConfiguration(f"heading-level must be >= 1, got {level}")
    return level


def parse_repository(repository: Optional[str]) -> tuple[str, str]:
    """``owner/repo`` 形式の文字列を (owner, repo) に分解する。"""
    if not repository:
        raise MissingInputError("No repository provided (set --repository or GITHUB_REPOSITORY).")

    owner, sep, repo = repository.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise InvalidConfiguration(f"Repository must be in owner/repo form, got {repository!r}")
    return owner, repo


def resolve_tag(explicit_tag: Optional[str], ref: Optional[str]) -> str:
    """処理対象のタグを決定する。

    明示指定が最優先。無ければ ``refs/tags/<tag>`` 形式の ref からタグ名を取り出す。
    ブランチ等タグ以外の ref からはタグを導出しない。

    Raises:
        MissingInputError: どちらからもタグを決定できない場合。
    """
    if explicit_tag:
        return explicit_tag
    if ref and ref.startswith(TAG_REF_PREFIX) and len(ref) > len(TAG_REF_PREFIX):
        return ref[len(TAG_REF_PREFIX):]
    raise MissingInputError("No tag provided or found in context.")


def load_settings(args: argparse.Namespace) -> Settings:
    """パース済みの引数と環境変数から Settings を構築する。"""
    heading_level = args.heading_level if args.heading_level is not None else _env("HEADING_LEVEL")

    settings = Settings(
        repository=args.repository or _env("GITHUB_REPOSITORY"),
        token=args.token or _env("GITHUB_TOKEN"),
        tag=args.tag or _env("RELEASE_TAG"),
        ref=_env("GITHUB_REF"),
        dry_run=args.dry_run or _parse_bool(_env("DRY_RUN")),
        category_map=args.category_map or _env("CATEGORY_MAP"),
        template=args.template or _env("RELEASE_TEMPLATE") or DEFAULT_TEMPLATE,
        empty_message=args.empty_message or _env("EMPTY_MESSAGE") or DEFAULT_EMPTY_MESSAGE,
        heading_level=_parse_heading_level(heading_level) if heading_level is not None else 2,
        base=args.base or _env("BASE_REF"),
        head=args.head or _env("HEAD_REF"),
    )
    logger.debug("Loaded settings for %s (dry_run=%s)", settings.repository, settings.dry_run)
    return settings
