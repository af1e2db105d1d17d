"""
HTML 文档树工具 — 基于 lxml.html

管线各阶段（清理 / 表格展平 / 图片修正）与客户端链接分类只依赖这里的
几个操作：解析、按 id/标签查找、读文本、序列化、删除节点。
"""

import html
import re

import lxml.html
from lxml import etree

EMPTY_DOCUMENT = "<html><head></head><body></body></html>"

# lxml 不接受带编码声明的 str，解码后的页面需先去掉开头的 <?xml ...?>
XML_DECLARATION_RE = re.compile(r"^\ufeff?\s*<\?xml[^>]*\?>", re.IGNORECASE)


def parse_document(markup: str):
    """解析整页 HTML，返回 <html> 根元素（空输入得到空文档）"""
    markup = XML_DECLARATION_RE.sub("", markup or "", count=1)
    if not markup.strip():
        markup = EMPTY_DOCUMENT
    return lxml.html.document_fromstring(markup)


def parse_fragment(markup: str, wrapper_id: str | None = None):
    """
    解析 HTML 片段，包在一个 <div> 中返回。
    片段开头的纯文本保存在 div.text，不会丢失。
    """
    root = lxml.html.fragment_fromstring(markup or "", create_parent="div")
    if wrapper_id:
        root.set("id", wrapper_id)
    return root


def find_by_id(root, element_id: str):
    """按 id 查找第一个元素（含根元素自身）"""
    found = root.xpath("descendant-or-self::*[@id=$eid]", eid=element_id)
    return found[0] if found else None


def find_body(root):
    found = root.xpath("descendant-or-self::body")
    return found[0] if found else None


def find_title(root) -> str:
    """页面 <title> 的文本内容（原样），没有则返回空串"""
    found = root.xpath("//title")
    if not found:
        return ""
    return found[0].text_content() or ""


def is_element(node) -> bool:
    """排除注释、处理指令等非元素节点（它们的 tag 不是字符串）"""
    return isinstance(node.tag, str)


def element_children(node) -> list:
    return [child for child in node if is_element(child)]


def next_element_sibling(node):
    sibling = node.getnext()
    while sibling is not None and not is_element(sibling):
        sibling = sibling.getnext()
    return sibling


def text_content(node) -> str:
    if node is None:
        return ""
    return node.text_content() or ""


def remove_element(node):
    """删除元素，保留其后的 tail 文本"""
    if node.getparent() is None:
        return
    node.drop_tree()


def append_text(parent, text: str):
    """在 parent 的末尾追加文本（写入最后一个子节点的 tail 或 parent.text）"""
    if not text:
        return
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def move_children(source, target):
    """
    将 source 的全部内容（开头文本 + 子节点）移动到 target 末尾。
    移动的是原节点本身，嵌套标记、链接原样保留。
    """
    append_text(target, source.text or "")
    source.text = None
    for child in list(source):
        # lxml 中 tail 随元素一同移动
        target.append(child)


def outer_html(node) -> str:
    return lxml.html.tostring(node, encoding="unicode", with_tail=False)


def inner_html(node) -> str:
    if node is None:
        return ""
    parts = [html.escape(node.text, quote=False)] if node.text else []
    for child in node:
        parts.append(etree.tostring(child, encoding="unicode", method="html"))
    return "".join(parts)
