"""
AdaOnline 章节目录 — 纯配置推导，无 I/O

章节结构来自上游站点的文件命名规律，而不是算法：
  - 每部（Part）的章数固定：43 / 11 / 8 / 1 / 6
  - 第 4 部只有一页（ada4.htm）
  - 只有部分章节有注释页（adaNNann.htm）

启动时生成一次，之后只读。
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlparse

import config

log = logging.getLogger(__name__)

# 每部章数（与上游站点保持一致，勿随意修改）
PART_CHAPTER_COUNTS = {
    1: 43,
    2: 11,
    3: 8,
    4: 1,   # 第 4 部为单页
    5: 6,
}

SINGLE_PAGE_PART = 4


def has_annotation_page(part: int, chapter: int) -> bool:
    """该章节在上游是否有注释页"""
    if part == 1 and 1 <= chapter <= 43:
        return True
    if part == 2 and 1 <= chapter <= 11:
        return True
    if part == 3 and 1 <= chapter <= 2:
        return True
    return False


def file_token(part: int, chapter: int) -> str:
    """上游文件名中的编号：ada11.htm、ada21.htm …；第 4 部为 ada4.htm"""
    if part == SINGLE_PAGE_PART:
        return str(SINGLE_PAGE_PART)
    return f"{part}{chapter}"


def chapter_filename(url: str) -> str:
    """URL 路径最后一段，小写（如 "ada12.htm"）"""
    return (urlparse(url).path.split("/")[-1] or "").lower()


@dataclass(frozen=True)
class ChapterDescriptor:
    id: str
    part: int
    chapter: int
    title: str
    text_url: str
    notes_url: str | None = None

    def to_summary(self) -> dict:
        """/api/chapters 列表项"""
        return {"id": self.id, "title": self.title, "textUrl": self.text_url}


def build_chapters(base_url: str | None = None) -> list[ChapterDescriptor]:
    """按部、章顺序生成全部章节描述"""
    base = base_url or config.ADA_BASE
    chapters = []
    for part in sorted(PART_CHAPTER_COUNTS):
        for ch in range(1, PART_CHAPTER_COUNTS[part] + 1):
            token = file_token(part, ch)
            notes_url = f"{base}ada{token}ann.htm" if has_annotation_page(part, ch) else None
            title = f"Part {part}" if part == SINGLE_PAGE_PART else f"Part {part}, Chapter {ch}"
            chapters.append(ChapterDescriptor(
                id=f"p{part}c{ch}",
                part=part,
                chapter=ch,
                title=title,
                text_url=f"{base}ada{token}.htm",
                notes_url=notes_url,
            ))
    return chapters


class AdaCatalog:
    """
    章节目录（只读）。
    提供按 id 查询与列表摘要。
    """

    def __init__(self, base_url: str | None = None):
        self.base_url = base_url or config.ADA_BASE
        self.chapters: tuple[ChapterDescriptor, ...] = tuple(build_chapters(self.base_url))
        self._by_id = {ch.id: ch for ch in self.chapters}
        if len(self._by_id) != len(self.chapters):
            raise ValueError("章节 id 重复")
        log.info(f"AdaCatalog 初始化完成: {len(self.chapters)} 个章节, "
                 f"{sum(1 for ch in self.chapters if ch.notes_url)} 个注释页")

    def __len__(self):
        return len(self.chapters)

    def __iter__(self):
        return iter(self.chapters)

    def get(self, chapter_id: str) -> ChapterDescriptor | None:
        return self._by_id.get(chapter_id)

    def summaries(self) -> list[dict]:
        return [ch.to_summary() for ch in self.chapters]

