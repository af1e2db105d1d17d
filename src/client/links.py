"""
链接分类 — 渲染后片段中每个 <a> 的去向

按顺序匹配，先命中者生效：
  1. 注释引用    空 href、"#"、页内锚点、adaNNann.htm → 打开注释浮层
  2. 跨章节跳转  规范化后的文件名属于某一章 → 重新加载该章
  3. 上游文档    上游站点的绝对地址，或以 .htm 结尾的相对地址 → 新窗口打开原页面
  4. 普通链接    其他一律新窗口打开，相对地址不改写
"""

import enum
import logging
import re
from dataclasses import dataclass
from urllib.parse import urlparse

import config
from core.ada_catalog import chapter_filename

log = logging.getLogger(__name__)

ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
ANNOTATION_FILE_RE = re.compile(r"ada\d+ann\.htm", re.IGNORECASE)
RELATIVE_DOC_RE = re.compile(r"\.htm(\?|#|$)", re.IGNORECASE)

NOTE_LINK_CLASS = "note-link"
EXTERNAL_REL = "noopener noreferrer"


class LinkKind(enum.Enum):
    ANNOTATION = "annotation"
    CHAPTER = "chapter"
    SOURCE_DOCUMENT = "source_document"
    EXTERNAL = "external"


@dataclass
class WiredLink:
    element: object
    kind: LinkKind
    href: str
    chapter_id: str | None = None

    @property
    def phrase(self) -> str:
        """注释查找用的短语：锚点自身的文字"""
        return (self.element.text_content() or "").strip()


# ============================================================
# href 判定
# ============================================================

def is_note_href(href: str | None) -> bool:
    if not href:
        return True
    href = href.strip()
    if href == "" or href.startswith("#"):
        return True
    return bool(ANNOTATION_FILE_RE.search(href))


def _source_host_re(base_url: str):
    host = urlparse(base_url).netloc
    return re.compile(rf"^https?://{re.escape(host)}", re.IGNORECASE)


def is_source_document(href: str | None, base_url: str | None = None) -> bool:
    """上游站点的文档：同站绝对地址，或以 .htm 结尾的相对地址"""
    if not href:
        return False
    if ABSOLUTE_URL_RE.match(href):
        return bool(_source_host_re(base_url or config.ADA_BASE).match(href))
    return bool(RELATIVE_DOC_RE.search(href))


def make_source_absolute(href: str | None, base_url: str | None = None) -> str:
    base = base_url or config.ADA_BASE
    if not href:
        return base
    if ABSOLUTE_URL_RE.match(href):
        return href
    return base + href.lstrip("/")


def normalize_href(href: str | None) -> str | None:
    """
    href → 章节索引的键：去掉查询串与锚点，取路径最后一段，小写。
    "ADA12.HTM?x=1#y" → "ada12.htm"
    """
    if not href:
        return None
    s = href.strip()
    if not s:
        return None

    cut = len(s)
    for sep in ("#", "?"):
        idx = s.find(sep)
        if idx >= 0:
            cut = min(cut, idx)
    s = s[:cut]
    if not s:
        return None

    if ABSOLUTE_URL_RE.match(s):
        try:
            s = urlparse(s).path.split("/")[-1]
        except ValueError:
            pass
    else:
        s = s.split("/")[-1]

    return s.lower() or None


def build_chapter_href_index(chapters) -> dict[str, str]:
    """由 /api/chapters 列表生成 {"ada12.htm": "p1c2", ...}"""
    index = {}
    for ch in chapters:
        text_url = ch.get("textUrl")
        if not text_url:
            continue
        try:
            name = chapter_filename(text_url)
        except ValueError:
            log.debug(f"无法解析章节地址: {text_url!r}")
            continue
        if name:
            index[name] = ch["id"]
    return index


def lookup_chapter_id(href: str | None, href_index: dict) -> str | None:
    key = normalize_href(href)
    if not key:
        return None
    return href_index.get(key)


def classify_href(href: str | None, href_index: dict, base_url: str | None = None):
    """返回 (LinkKind, chapter_id)"""
    if is_note_href(href):
        return LinkKind.ANNOTATION, None
    chapter_id = lookup_chapter_id(href, href_index)
    if chapter_id:
        return LinkKind.CHAPTER, chapter_id
    if is_source_document(href, base_url):
        return LinkKind.SOURCE_DOCUMENT, None
    return LinkKind.EXTERNAL, None


# ============================================================
# 片段接线
# ============================================================

def wire_links(root, href_index: dict, base_url: str | None = None) -> list[WiredLink]:
    """
    对 root 下每个 <a> 分类并改写属性，返回接线结果（文档顺序）。
    注释引用与章节跳转的点击行为由 ReaderSession.activate 处理。
    """
    wired = []
    if root is None:
        return wired

    for a in root.iter("a"):
        raw_href = a.get("href") or ""
        kind, chapter_id = classify_href(raw_href, href_index, base_url)

        if kind is LinkKind.ANNOTATION:
            a.classes.add(NOTE_LINK_CLASS)
        elif kind is LinkKind.SOURCE_DOCUMENT:
            raw_href = make_source_absolute(raw_href, base_url)
            a.set("href", raw_href)
            a.set("target", "_blank")
            a.set("rel", EXTERNAL_REL)
        elif kind is LinkKind.EXTERNAL:
            a.set("target", "_blank")
            a.set("rel", EXTERNAL_REL)

        wired.append(WiredLink(element=a, kind=kind, href=raw_href, chapter_id=chapter_id))

    return wired
