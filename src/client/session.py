"""
阅读会话 — 客户端的全部可变状态集中在这里

  - 章节列表与 文件名→章节 索引（每次会话构建一次）
  - 当前章节的正文树（已接线）与注释树（换章时整体替换）
  - 注释浮层栈（换章时清空）

加载失败只记录日志并显示提示文字，不向调用方抛出。
连续快速换章不做取消，后返回的结果覆盖先前状态。
"""

import logging

import config
from client.api import ReaderApi
from client.links import LinkKind, WiredLink, build_chapter_href_index, wire_links
from client.overlay import DEFAULT_TITLE, OverlayStack, OverlayView
from client.snippets import find_note_snippet
from core.html_tree import inner_html, parse_fragment

log = logging.getLogger(__name__)

TEXT_ROOT_ID = "text"
NOTES_ROOT_ID = "notes-root"
OVERLAY_ROOT_ID = "overlay-content"

LOADING_MESSAGE = "Loading…"
NO_CHAPTERS_MESSAGE = "No chapters configured yet."
LIST_FAILED_MESSAGE = "Failed to load chapter list."
CHAPTER_FAILED_MESSAGE = "Failed to load chapter."


class ReaderSession:

    def __init__(self, api: ReaderApi | None = None, base_url: str | None = None):
        self.api = api or ReaderApi()
        self.base_url = base_url or config.ADA_BASE

        self.chapters: list[dict] = []
        self.href_index: dict[str, str] = {}
        self.selected_id: str | None = None

        self.chapter_title = ""
        self.text_root = None
        self.text_links: list[WiredLink] = []
        self.notes_html = ""
        self.notes_root = None

        self.overlay = OverlayStack()
        self.overlay_root = None
        self.overlay_links: list[WiredLink] = []

        # 非空时代替正文显示（加载中 / 失败提示）
        self.status = ""

    # ================================================================
    # 状态读取
    # ================================================================

    @property
    def text_html(self) -> str:
        return inner_html(self.text_root)

    @property
    def overlay_view(self) -> OverlayView:
        return self.overlay.view

    # ================================================================
    # 章节加载
    # ================================================================

    def start(self) -> bool:
        """加载章节列表并打开第一章"""
        try:
            self.load_chapter_list()
        except Exception:
            log.exception("章节列表加载失败")
            self.status = LIST_FAILED_MESSAGE
            return False
        return True

    def load_chapter_list(self):
        chapters = self.api.list_chapters()
        self.chapters = chapters
        self.href_index = build_chapter_href_index(chapters)
        log.info(f"章节列表: {len(chapters)} 章, 索引 {len(self.href_index)} 项")

        if not chapters:
            self.text_root = None
            self.status = NO_CHAPTERS_MESSAGE
            return
        self.selected_id = chapters[0]["id"]
        self.load_chapter(self.selected_id)

    def load_chapter(self, chapter_id: str):
        """加载一章；先清空浮层，正文与注释树整体替换"""
        self.status = LOADING_MESSAGE
        self.text_root = None
        self.close_overlay()

        data = self.api.get_chapter(chapter_id)

        self.chapter_title = data.get("title", "")
        self.text_root = parse_fragment(data.get("textHtml") or "", wrapper_id=TEXT_ROOT_ID)
        self.notes_html = data.get("notesHtml") or ""
        if self.notes_html:
            self.notes_root = parse_fragment(self.notes_html, wrapper_id=NOTES_ROOT_ID)
        else:
            self.notes_root = None

        self.text_links = wire_links(self.text_root, self.href_index, self.base_url)
        self.status = ""

    def select_chapter(self, chapter_id: str) -> bool:
        """切换章节（对应下拉框选择）"""
        self.selected_id = chapter_id
        try:
            self.load_chapter(chapter_id)
        except Exception:
            log.exception(f"章节 {chapter_id} 加载失败")
            self.status = CHAPTER_FAILED_MESSAGE
            return False
        return True

    # ================================================================
    # 链接点击
    # ================================================================

    def activate(self, link: WiredLink) -> str | None:
        """
        执行一次链接点击。
        注释引用 / 章节跳转在会话内处理；其余链接返回应在新窗口打开的地址。
        """
        if link.kind is LinkKind.ANNOTATION:
            self.open_note_for_phrase(link.phrase)
            return None
        if link.kind is LinkKind.CHAPTER:
            self.close_overlay()
            self.select_chapter(link.chapter_id)
            return None
        return link.href

    def open_note_for_phrase(self, phrase: str):
        if self.notes_root is None:
            self._push_overlay(self.notes_html, DEFAULT_TITLE)
            return
        snippet = find_note_snippet(phrase, self.notes_root) if phrase else ""
        self._push_overlay(snippet or self.notes_html, phrase or DEFAULT_TITLE)

    # ================================================================
    # 浮层
    # ================================================================

    def _push_overlay(self, html: str, title: str):
        self.overlay.push(html, title)
        self._render_overlay()

    def _render_overlay(self):
        """重建浮层内容树，并为其中的链接接线（注释中的注释可继续入栈）"""
        view = self.overlay.view
        if not view.visible:
            self.overlay_root = None
            self.overlay_links = []
            return
        self.overlay_root = parse_fragment(view.html, wrapper_id=OVERLAY_ROOT_ID)
        self.overlay_links = wire_links(self.overlay_root, self.href_index, self.base_url)

    def back(self):
        self.overlay.pop()
        self._render_overlay()

    def close_overlay(self):
        self.overlay.close_completely()
        self._render_overlay()

    def click_overlay(self, on_backdrop: bool):
        """点击遮罩（而非浮层面板本身）时完全关闭"""
        if on_backdrop:
            self.close_overlay()
