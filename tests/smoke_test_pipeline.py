"""
烟雾测试：逐章抓取上游页面并运行完整规范化管线（需要网络）。
检查输出中是否残留源页面样式或页边注表格。
全部结果写入 smoke_test_report.txt。

用法:
  python tests/smoke_test_pipeline.py            # 全部章节
  python tests/smoke_test_pipeline.py p1c1 p2c3  # 指定章节
"""

import sys
import re
import time
import asyncio
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

import config
from core.ada_catalog import AdaCatalog
from core.ada_pipeline import ChapterPipeline
from core.errors import AdaError
from core.html_tree import parse_fragment
from core.margin_tables import is_margin_table

# ============================================================
# 配置
# ============================================================
REPORT_PATH = Path(__file__).parent / "smoke_test_report.txt"

# 残留检测 pattern（图片自带的响应式样式除外）
LEFTOVER_PATTERNS = [
    (re.compile(r"<style\b", re.IGNORECASE), "<style>"),
    (re.compile(r"<link\b", re.IGNORECASE), "<link>"),
    (re.compile(r"<(?!img\b)[a-z0-9]+\b[^>]*\sstyle=", re.IGNORECASE), "style 属性"),
    (re.compile(r"<img\b[^>]*\s(?:width|height)=", re.IGNORECASE), "图片尺寸"),
]


def check_fragment(label, html, f):
    """返回发现的问题数"""
    problems = 0
    for pat, name in LEFTOVER_PATTERNS:
        m = pat.search(html)
        if m:
            ctx = html[max(0, m.start() - 20):m.end() + 40].replace("\n", " ")
            f.write(f"[LEFTOVER] {label}: {name} → ...{ctx}...\n")
            problems += 1

    root = parse_fragment(html)
    tables = [t for t in root.iter("table") if is_margin_table(t)]
    if tables:
        f.write(f"[TABLE] {label}: 仍有 {len(tables)} 个页边注表格\n")
        problems += 1
    return problems


async def run(chapter_ids):
    catalog = AdaCatalog(config.ADA_BASE)
    pipeline = ChapterPipeline(catalog=catalog)
    ids = chapter_ids or [ch.id for ch in catalog]

    f = open(REPORT_PATH, "w", encoding="utf-8")
    f.write("AdaOnline 规范化管线烟雾测试报告\n")
    f.write(f"时间: {time.strftime('%Y-%m-%d %H:%M:%S')}\n")
    f.write(f"上游: {config.ADA_BASE}\n")
    f.write(f"章节数: {len(ids)}\n")
    f.write(f"{'=' * 60}\n\n")

    success = 0
    dirty = 0
    errors = 0
    start = time.time()

    for chapter_id in ids:
        try:
            doc = await pipeline.get_chapter(chapter_id)
        except AdaError as e:
            f.write(f"[ERROR] {chapter_id}: {e.status_code} {e.message}\n")
            errors += 1
            continue

        problems = check_fragment(f"{chapter_id}/text", doc.text_html, f)
        if doc.notes_html:
            problems += check_fragment(f"{chapter_id}/notes", doc.notes_html, f)
        if not doc.text_html.strip():
            f.write(f"[EMPTY] {chapter_id}: 正文为空\n")
            problems += 1

        if problems:
            dirty += 1
        else:
            success += 1
        f.flush()

    elapsed = time.time() - start

    f.write(f"\n{'=' * 60}\n")
    f.write("汇总\n")
    f.write(f"{'=' * 60}\n")
    f.write(f"耗时: {elapsed:.1f} 秒\n")
    f.write(f"通过: {success}\n")
    f.write(f"有残留: {dirty}\n")
    f.write(f"抓取错误: {errors}\n")
    f.close()

    print(f"Done. {len(ids)} chapters in {elapsed:.1f}s. Report: {REPORT_PATH}")


def main():
    asyncio.run(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
