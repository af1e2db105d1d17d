"""
注释浮层状态 — 栈式，支持"注释中的注释"逐层返回

  Hidden            栈为空
  Visible(depth≥1)  显示栈顶；depth > 1 时显示返回按钮
"""

from dataclasses import dataclass

DEFAULT_TITLE = "Commentary"
EMPTY_COMMENTARY_HTML = "<p>No commentary found.</p>"


@dataclass(frozen=True)
class OverlayEntry:
    html: str
    title: str | None


@dataclass(frozen=True)
class OverlayView:
    """当前浮层的渲染结果"""
    visible: bool = False
    title: str = ""
    html: str = ""
    has_stack: bool = False    # 显示返回按钮
    modal_open: bool = False   # 锁定背景滚动


HIDDEN = OverlayView()


class OverlayStack:

    def __init__(self):
        self._entries: list[OverlayEntry] = []
        self.view = HIDDEN

    @property
    def depth(self) -> int:
        return len(self._entries)

    @property
    def visible(self) -> bool:
        return self.view.visible

    @property
    def top(self) -> OverlayEntry | None:
        return self._entries[-1] if self._entries else None

    def push(self, html: str, title: str | None = None) -> OverlayView:
        self._entries.append(OverlayEntry(html=html or EMPTY_COMMENTARY_HTML, title=title))
        return self.render()

    def pop(self) -> OverlayView:
        """返回上一层；只剩一层时直接关闭"""
        if len(self._entries) > 1:
            self._entries.pop()
            return self.render()
        return self.close_completely()

    def close_completely(self) -> OverlayView:
        self._entries.clear()
        self.view = HIDDEN
        return self.view

    def render(self) -> OverlayView:
        top = self.top
        if top is None:
            return self.close_completely()
        self.view = OverlayView(
            visible=True,
            title=top.title or DEFAULT_TITLE,
            html=top.html,
            has_stack=len(self._entries) > 1,
            modal_open=True,
        )
        return self.view
