#!/usr/bin/env python3
"""PR タイトルの分類結果レポートを生成するスクリプト。

タイトルを 1 行 1 件で読み込み、リリースノート生成時と同じ規則で分類して CSV に保存する。
カテゴリマップの上書き設定を試したり、既存リポジトリのタイトルが
Conventional Commits 形式に沿っているかを確認したりする用途を想定している。

Usage:
    # ファイルから読み込み
    uv run python scripts/title_report.py --input titles.txt

    # 標準入力から読み込み、カテゴリマップを上書き
    gh pr list --state merged --json title -q '.[].title' | \\
        uv run python scripts/title_report.py --category-map '{"perf": "Performance"}'
"""

import argparse
import csv
import logging
import sys
from collections import Counter
from pathlib import Path

# プロジェクトルートをパスに追加
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

load_dotenv()

from tagnotes.categories import CategoryMap, build_category_map
from tagnotes.classifier import parse_title

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = PROJECT_ROOT / "scripts" / "title_report.csv"
UNRECOGNIZED = "Unrecognized"


def build_report(titles: list[str], category_map: CategoryMap) -> list[dict]:
    """タイトルごとの分類結果を返す。

    Returns:
        [{"title": "原文", "category": "Features"|...|"Unrecognized", "summary": "..."}, ...]
    """
    rows = []
    for title in titles:
        parsed = parse_title(title, category_map)
        if parsed is None:
            rows.append({"title": title, "category": UNRECOGNIZED, "summary": ""})
        else:
            rows.append({"title": title, "category": parsed.category, "summary": parsed.summary})
    return rows


def write_report(rows: list[dict], output_path: Path) -> None:
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["title", "category", "summary"])
        writer.writeheader()
        writer.writerows(rows)


def main():
    parser = argparse.ArgumentParser(description="PR タイトルの分類結果レポート")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="タイトル一覧ファイル（省略時は標準入力）",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help=f"出力先 CSV（デフォルト: {DEFAULT_OUTPUT_PATH.name}）",
    )
    parser.add_argument(
        "--category-map",
        type=str,
        default=None,
        help='type → カテゴリ名の上書き（JSON。例: \'{"perf": "Performance"}\'）',
    )
    args = parser.parse_args()

    category_map = build_category_map(args.category_map)

    if args.input:
        lines = args.input.read_text(encoding="utf-8").splitlines()
    else:
        lines = sys.stdin.read().splitlines()
    titles = [line.strip() for line in lines if line.strip()]

    rows = build_report(titles, category_map)
    write_report(rows, args.output)

    counts = Counter(row["category"] for row in rows)
    print("=" * 70)
    print(f"分類結果を保存: {args.output}")
    print(f"  総タイトル数: {len(rows)}")
    for category, count in sorted(counts.items()):
        print(f"  {category}: {count}件")
    if counts[UNRECOGNIZED]:
        print(f"\n{UNRECOGNIZED} のタイトルはリリースノートに掲載されません。")


if __name__ == "__main__":
    main()
