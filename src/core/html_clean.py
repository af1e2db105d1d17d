"""
旧版样式清理

AdaOnline 页面大量使用内联样式、<style>/<link> 与手工换行排版，
移动端统一去除后再交给后续阶段处理。
"""

import logging

from core.html_tree import remove_element

log = logging.getLogger(__name__)


def strip_legacy_styling(root):
    """删除所有 <style>/<link> 元素及所有 style 属性（原地修改）"""
    if root is None:
        return

    removed = 0
    for el in root.xpath(".//style | .//link"):
        remove_element(el)
        removed += 1

    styled = root.xpath("descendant-or-self::*[@style]")
    for el in styled:
        del el.attrib["style"]

    if removed or styled:
        log.debug(f"样式清理: 删除 {removed} 个 style/link 元素, {len(styled)} 个 style 属性")


def strip_line_breaks(root):
    """删除源页面中的 <br>（前后文本保持相连）"""
    if root is None:
        return
    for br in root.xpath(".//br"):
        remove_element(br)
