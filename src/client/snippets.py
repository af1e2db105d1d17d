"""
注释片段查找

点击正文中的短语后，在已加载的注释文档里找包含该短语、且文本最短的块
（段落 / div / 列表项 / dd），即最具体的那一条注释，而不是恰好也包含
该短语的外层大块。命中后再带上紧随其后的最多三个兄弟块，覆盖
"标记行 + 多段说明" 的短注释。
"""

import re

from core.html_tree import next_element_sibling, outer_html, text_content

WHITESPACE_RE = re.compile(r"\s+")

CANDIDATE_XPATH = ".//p | .//div | .//li | .//dd"
MAX_SNIPPET_BLOCKS = 4


def normalize_text(text: str) -> str:
    """压缩连续空白、去首尾空白、转小写"""
    return WHITESPACE_RE.sub(" ", text or "").strip().lower()


def find_best_block(phrase: str, notes_root):
    """返回包含短语且规范化文本最短的块；并列时取文档中靠前者"""
    norm_phrase = normalize_text(phrase)
    if not norm_phrase or notes_root is None:
        return None

    best = None
    best_len = None
    for el in notes_root.xpath(CANDIDATE_XPATH):
        text = normalize_text(text_content(el))
        if not text:
            continue
        if norm_phrase in text and (best_len is None or len(text) < best_len):
            best = el
            best_len = len(text)
    return best


def find_note_snippet(phrase: str, notes_root) -> str:
    """
    命中块的 HTML + 最多三个后续兄弟块（遇到无文字的兄弟即停）。
    未命中或没有注释文档时返回空串，由调用方退回显示整页注释。
    """
    best = find_best_block(phrase, notes_root)
    if best is None:
        return ""

    buf = [outer_html(best)]
    nxt = next_element_sibling(best)
    while nxt is not None and len(buf) < MAX_SNIPPET_BLOCKS:
        if not normalize_text(text_content(nxt)):
            break
        buf.append(outer_html(nxt))
        nxt = next_element_sibling(nxt)
    return "\n".join(buf)
