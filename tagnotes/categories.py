"""カテゴリ定義モジュール。

Conventional Commits の type トークンからリリースノートの見出し（カテゴリ名）への
対応表を管理する。
"""

import json
import logging
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

CategoryMap = Mapping[str, str]

# どの type にも該当しない場合のカテゴリ
OTHER_CATEGORY = "Other"

DEFAULT_CATEGORY_MAP: CategoryMap = MappingProxyType({
    "feat": "Features",
    "fix": "Fixes",
    "chore": "Chores",
    "docs": "Docs",
    "refactor": "Refactors",
    "perf": "Performance",
    "build": "Build",
    "ci": "CI",
    "test": "Tests",
    "style": "Style",
    "deps": "Dependencies",
})


class InvalidConfiguration(ValueError):
    """設定値（カテゴリマップ等）が不正な場合に送出される。"""


def build_category_map(override: Optional[str] = None) -> CategoryMap:
    """デフォルトのカテゴリマップにユーザー指定の上書きをマージする。

    Args:
        override: ``{"perf": "Performance"}`` 形式の JSON 文字列。
                  空文字列または None の場合はデフォルトをそのまま返す。

    Returns:
        読み取り専用のカテゴリマップ。キーが重複した場合は上書き側が優先される。

    Raises:
        InvalidConfiguration: JSON として解釈できない、またはフラットな
            文字列→文字列の対応表でない場合。
    """
    if not override or not override.strip():
        return DEFAULT_CATEGORY_MAP

    try:
        parsed = json.loads(override)
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"Invalid JSON in category-map input: {e}") from e

    if not isinstance(parsed, dict):
        raise InvalidConfiguration("category-map input must be a JSON object")

    for key, value in parsed.items():
        if not isinstance(value, str):
            raise InvalidConfiguration(
                f"category-map value for {key!r} must be a string, got {type(value).__name__}"
            )

    merged = dict(DEFAULT_CATEGORY_MAP)
    # 照合時に type は小文字化されるため、キーも小文字に揃える
    merged.update({key.lower(): value for key, value in parsed.items()})
    logger.info("Using category map with %d override(s)", len(parsed))
    return MappingProxyType(merged)
