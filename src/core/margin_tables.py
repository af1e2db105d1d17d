"""
页边注表格展平

AdaOnline 正文用两栏表格排版：左栏是页边标记（如 "3.05"），右栏是正文。

    row0: [空]    | "...Mount Tabor"
    row1: "3.05"  | "Ltd., 1880). That pronouncement..."

展平为一个连续的 <p>，标记单独占一行：

    ...Mount Tabor<br>3.05<br>Ltd., 1880). That pronouncement...

无标记的续行只补一个空格，保证客户端按短语匹配注释时词边界干净。
"""

import logging

from lxml import etree

from core.html_tree import append_text, element_children, move_children

log = logging.getLogger(__name__)


def _table_rows(table) -> list:
    return table.xpath(".//tr")


def _is_margin_row(tr) -> bool:
    """恰好两个单元格且都是 <td>"""
    cells = element_children(tr)
    return len(cells) == 2 and all(c.tag.lower() == "td" for c in cells)


def is_margin_table(table) -> bool:
    """
    判断是否为页边注布局：所有行都恰好两个 <td>。
    保守判定，真正的数据表格（任一行列数不为 2）一律不动。
    """
    rows = _table_rows(table)
    return bool(rows) and all(_is_margin_row(tr) for tr in rows)


def _build_flow_block(table):
    """按行拼接出替代表格的 <p>"""
    # makeelement 沿用源文档的解析器，生成的仍是 HtmlElement
    wrapper = table.makeelement("p", {})

    for idx, tr in enumerate(_table_rows(table)):
        cells = element_children(tr)
        if len(cells) < 2:
            continue
        marker_cell, content_cell = cells[0], cells[1]
        has_marker = marker_cell.text_content().strip() != ""

        if idx == 0:
            if has_marker:
                move_children(marker_cell, wrapper)
                etree.SubElement(wrapper, "br")
            move_children(content_cell, wrapper)
        elif has_marker:
            # 新的页边标记：另起一行
            etree.SubElement(wrapper, "br")
            move_children(marker_cell, wrapper)
            etree.SubElement(wrapper, "br")
            move_children(content_cell, wrapper)
        else:
            # 续行
            append_text(wrapper, " ")
            move_children(content_cell, wrapper)

    return wrapper


def flatten_margin_tables(root) -> int:
    """
    展平 root 下所有页边注表格（原地修改），返回处理的表格数。
    对已展平的输出再次执行不会有任何变化。
    """
    if root is None:
        return 0

    flattened = 0
    for table in list(root.iter("table")):
        parent = table.getparent()
        if parent is None or not is_margin_table(table):
            continue

        wrapper = _build_flow_block(table)
        wrapper.tail = table.tail
        table.tail = None
        parent.replace(table, wrapper)
        flattened += 1

    if flattened:
        log.debug(f"展平页边注表格 {flattened} 个")
    return flattened
