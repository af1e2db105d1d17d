"""
图片规范化：相对地址转绝对地址，去除固定尺寸，统一响应式样式
"""

import logging
import re
from urllib.parse import urljoin

log = logging.getLogger(__name__)

ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

# 移动端统一的图片样式（最大宽度 100%、等比缩放、居中）
RESPONSIVE_IMG_STYLE = "max-width: 100%; height: auto; display: block; margin: 12px auto"


def resolve_src(src: str, base_url: str) -> str:
    """将相对图片地址解析为绝对地址；解析失败时原样返回"""
    if not src or ABSOLUTE_URL_RE.match(src):
        return src
    try:
        return urljoin(base_url, src)
    except ValueError as e:
        log.debug(f"图片地址无法解析，保留原值 {src!r}: {e}")
        return src


def fix_images(root, base_url: str):
    """修正 root 下所有 src 非空的 <img>（原地修改）"""
    if root is None:
        return
    for img in root.xpath(".//img[@src]"):
        src = img.get("src") or ""
        if not src:
            continue
        fixed = resolve_src(src, base_url)
        if fixed != src:
            img.set("src", fixed)

        img.attrib.pop("width", None)
        img.attrib.pop("height", None)
        img.set("style", RESPONSIVE_IMG_STYLE)
