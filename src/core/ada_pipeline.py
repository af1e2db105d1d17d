"""
章节抓取与规范化管线

  1. 按章节 id 查目录，得到正文 / 注释页 URL
  2. 并发抓取两页（注释页可能不存在），任一失败则整体失败
  3. 定位内容容器（#text / #annotations，缺失时退回 <body>）
  4. 依次执行规范化阶段，输出正文与注释两个 HTML 片段

规范化阶段的顺序有前后依赖，见 NORMALIZE_STAGES。
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Callable

import requests

import config
from core.ada_catalog import AdaCatalog
from core.errors import ChapterNotFound, InvalidReference, UpstreamFailure
from core.html_clean import strip_legacy_styling, strip_line_breaks
from core.html_tree import find_body, find_by_id, find_title, inner_html, parse_document
from core.images import fix_images
from core.margin_tables import flatten_margin_tables

log = logging.getLogger(__name__)

TEXT_CONTAINER_ID = "text"
NOTES_CONTAINER_ID = "annotations"

# 参考页只允许简单文件名（如 422viskovatov.htm），防止借本服务请求任意上游路径
SAFE_REF_FILE_RE = re.compile(r"[0-9A-Za-z_-]+\.htm", re.IGNORECASE)


# ============================================================
# 上游抓取
# ============================================================

class AdaFetcher:
    """上游页面抓取（requests，无重试）"""

    def __init__(self, session: requests.Session | None = None,
                 timeout: float | None = None):
        self.session = session or self._build_session()
        self.timeout = timeout if timeout is not None else config.FETCH_TIMEOUT

    @staticmethod
    def _build_session() -> requests.Session:
        sess = requests.Session()
        sess.headers.update({"User-Agent": config.USER_AGENT})
        return sess

    def fetch(self, url: str) -> str:
        """GET 页面并返回文本；非 2xx 或网络错误均抛 UpstreamFailure"""
        log.info(f"抓取上游页面: {url}")
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning(f"上游请求失败 {url}: {e}")
            raise UpstreamFailure(url=url) from e

        if not resp.ok:
            log.warning(f"上游返回 {resp.status_code}: {url}")
            raise UpstreamFailure(url=url, status=resp.status_code)

        # 旧页面常不声明编码，此时用 requests 的探测结果
        if "charset" not in resp.headers.get("content-type", "").lower():
            resp.encoding = resp.apparent_encoding or "utf-8"
        return resp.text


# ============================================================
# 规范化阶段
# ============================================================

@dataclass(frozen=True)
class Stage:
    name: str
    run: Callable
    doc: str = ""


NORMALIZE_STAGES = (
    Stage(
        "clean",
        lambda root, base_url: strip_legacy_styling(root),
        "前置：无。后置：无 <style>/<link>，无 style 属性。"
        "必须最先执行，避免后续阶段处理即将丢弃的样式。",
    ),
    Stage(
        "strip_line_breaks",
        lambda root, base_url: strip_line_breaks(root),
        "后置：源页面的 <br> 全部删除。必须早于展平，展平会插入自己的 <br>。",
    ),
    Stage(
        "flatten_margin_tables",
        lambda root, base_url: flatten_margin_tables(root),
        "后置：不再有页边注表格（每行恰好两个 <td>）。",
    ),
    Stage(
        "fix_images",
        fix_images,
        "后置：<img> 地址为绝对地址，无 width/height，带统一响应式样式。",
    ),
)


def normalize_root(root, base_url: str, stages=NORMALIZE_STAGES):
    """按顺序执行全部规范化阶段（原地修改）"""
    if root is None:
        return None
    for stage in stages:
        stage.run(root, base_url)
    return root


def locate_root(doc, container_id: str):
    """优先取指定 id 的内容容器，缺失时退回 <body>"""
    root = find_by_id(doc, container_id)
    if root is None:
        root = find_body(doc)
    return root


def normalize_page(markup: str, base_url: str, container_id: str) -> str:
    """解析整页 → 定位容器 → 规范化 → 返回容器的 innerHTML"""
    doc = parse_document(markup)
    root = normalize_root(locate_root(doc, container_id), base_url)
    return inner_html(root)


@dataclass
class NormalizedDocument:
    id: str
    title: str
    text_html: str
    notes_html: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "textHtml": self.text_html,
            "notesHtml": self.notes_html,
        }


@dataclass
class ReferencePage:
    title: str
    html: str

    def to_dict(self) -> dict:
        return {"title": self.title, "html": self.html}


# ============================================================
# 管线
# ============================================================

class ChapterPipeline:
    """章节 / 参考页的抓取与规范化"""

    def __init__(self, catalog: AdaCatalog | None = None,
                 fetcher: AdaFetcher | None = None,
                 base_url: str | None = None):
        self.catalog = catalog or AdaCatalog()
        self.fetcher = fetcher or AdaFetcher()
        self.base_url = base_url or self.catalog.base_url

    async def _fetch(self, url: str | None) -> str:
        if not url:
            return ""
        return await asyncio.to_thread(self.fetcher.fetch, url)

    async def get_chapter(self, chapter_id: str) -> NormalizedDocument:
        """
        抓取并规范化一章。
        两页并发抓取，都成功（或注释页本就不存在）才返回，没有部分成功。
        """
        chapter = self.catalog.get(chapter_id)
        if chapter is None:
            raise ChapterNotFound()

        text_raw, notes_raw = await asyncio.gather(
            self._fetch(chapter.text_url),
            self._fetch(chapter.notes_url),
        )

        text_html = normalize_page(text_raw, chapter.text_url, TEXT_CONTAINER_ID)
        notes_html = ""
        if notes_raw:
            notes_html = normalize_page(notes_raw, chapter.notes_url, NOTES_CONTAINER_ID)

        log.info(f"章节 {chapter.id} 规范化完成: 正文 {len(text_html)} 字符, "
                 f"注释 {len(notes_html)} 字符")
        return NormalizedDocument(
            id=chapter.id,
            title=chapter.title,
            text_html=text_html,
            notes_html=notes_html,
        )

    async def get_reference(self, file: str) -> ReferencePage:
        """抓取二级参考页（如 422viskovatov.htm）"""
        if not file or not SAFE_REF_FILE_RE.fullmatch(file):
            raise InvalidReference()

        url = f"{self.base_url}{file}"
        markup = await self._fetch(url)

        doc = parse_document(markup)
        root = find_body(doc)
        if root is None:
            root = doc
        normalize_root(root, url)

        return ReferencePage(
            title=find_title(doc) or file,
            html=inner_html(root),
        )
