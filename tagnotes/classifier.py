"""PR タイトルを Conventional Commits 形式として解析・分類するモジュール。"""

import re
from dataclasses import dataclass
from typing import Optional

from tagnotes.categories import OTHER_CATEGORY, CategoryMap

# type(scope)!: summary
_TITLE_RE = re.compile(r"^([A-Za-z-]+)(?:\([^)]*\))?!?:\s+(.+)", re.DOTALL)


@dataclass(frozen=True)
class ParsedTitle:
    """分類済みの PR タイトル。"""

    category: str
    summary: str


@dataclass(frozen=True)
class CategorizedEntry(ParsedTitle):
    """リリースノートに載せる 1 件分の PR。"""

    pr: int


def _lookup_category(type_token: str, category_map: CategoryMap) -> str:
    token = type_token.lower()
    if token in category_map:
        return category_map[token]

    # "ci-pipeline" のようなハイフン付き type は先頭部分で再照合する
    if "-" in token:
        head = token.split("-", 1)[0]
        if head in category_map:
            return category_map[head]

    return OTHER_CATEGORY


def parse_title(title: str, category_map: CategoryMap) -> Optional[ParsedTitle]:
    """PR タイトルを解析してカテゴリと要約を返す。

    Args:
        title: PR タイトル（例: "fix(api): repair"）。
        category_map: type トークン → カテゴリ名の対応表。

    Returns:
        ParsedTitle。形式に合致しないタイトルの場合は None。
        scope と破壊的変更マーカー（!）は要約に含まれない。
    """
    match = _TITLE_RE.match(title)
    if not match:
        return None

    type_token, summary = match.groups()
    return ParsedTitle(category=_lookup_category(type_token, category_map), summary=summary)
