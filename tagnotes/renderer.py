"""カテゴリ別 PR を Markdown のリリースノート本文に整形するモジュール。"""

import re
from dataclasses import dataclass
from typing import Optional

from tagnotes.aggregator import Categorized

DEFAULT_TEMPLATE = "{{sections}}"
DEFAULT_EMPTY_MESSAGE = "No categorized changes found."

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(sections|tag|previousTag)\s*\}\}", re.IGNORECASE)


@dataclass
class RenderOptions:
    """本文の整形オプション。"""

    heading_level: int = 2
    empty_message: str = DEFAULT_EMPTY_MESSAGE
    template: str = DEFAULT_TEMPLATE
    tag: str = ""
    previous_tag: Optional[str] = None


def _build_sections(categorized: Categorized, heading_level: int) -> str:
    """カテゴリ名順・PR 番号順に並べた見出し付きセクションを構築する。"""
    heading = "#" * max(1, heading_level)
    blocks = []
    for category in sorted(categorized):
        items = sorted(categorized[category], key=lambda item: item.pr)
        lines = [f"{heading} {category}"]
        lines.extend(f"- {item.summary} (#{item.pr})" for item in items)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _replace_template(template: str, sections: str, tag: str, previous_tag: Optional[str]) -> str:
    values = {
        "sections": sections,
        "tag": tag,
        "previoustag": previous_tag or "",
    }
    # 置換後の文字列を再走査しないよう 1 パスで置換する
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1).lower()], template)


def render_body(categorized: Categorized, options: RenderOptions) -> str:
    """リリースノート本文を生成する。

    同じ入力からは常に同じ文字列が得られる（既存リリースの冪等な更新に必要）。

    Args:
        categorized: カテゴリ名 → PR エントリのリスト。
        options: 見出しレベル・空メッセージ・テンプレート等。

    Returns:
        テンプレートの ``{{sections}}`` / ``{{tag}}`` / ``{{previousTag}}`` を
        置換した文字列。カテゴリが空の場合、sections は empty_message になる。
    """
    if categorized:
        content = _build_sections(categorized, options.heading_level)
    else:
        content = options.empty_message
    return _replace_template(options.template, content, options.tag, options.previous_tag)
