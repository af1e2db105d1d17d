from __future__ import annotations

from core.html_tree import parse_fragment
from core.images import RESPONSIVE_IMG_STYLE, fix_images, resolve_src


BASE = "https://host/x/y.htm"


def test_relative_src_is_resolved_against_page_url() -> None:
    root = parse_fragment('<img src="foo/bar.jpg" width="10" height="20">')
    fix_images(root, BASE)
    img = root.xpath(".//img")[0]
    assert img.get("src") == "https://host/x/foo/bar.jpg"


def test_absolute_src_is_unchanged() -> None:
    root = parse_fragment('<img src="HTTPS://cdn.example.org/pic.png" width="5">')
    fix_images(root, BASE)
    img = root.xpath(".//img")[0]
    assert img.get("src") == "HTTPS://cdn.example.org/pic.png"


def test_sizing_is_replaced_by_responsive_style() -> None:
    root = parse_fragment(
        '<img src="a.gif" width="1" height="2">'
        '<img src="http://h/b.gif" height="3">'
        '<img alt="no src" width="9">'
    )
    fix_images(root, BASE)
    with_src = root.xpath(".//img[@src]")
    assert len(with_src) == 2
    for img in with_src:
        assert img.get("width") is None
        assert img.get("height") is None
        assert img.get("style") == RESPONSIVE_IMG_STYLE
    # 没有 src 的图片不处理
    assert root.xpath(".//img[not(@src)]")[0].get("width") == "9"


def test_unresolvable_src_is_left_unchanged() -> None:
    assert resolve_src("//[broken/x.png", BASE) == "//[broken/x.png"

    root = parse_fragment('<img src="//[broken/x.png" width="1">')
    fix_images(root, BASE)
    img = root.xpath(".//img")[0]
    assert img.get("src") == "//[broken/x.png"
    assert img.get("width") is None


def test_fix_images_none_root() -> None:
    fix_images(None, BASE)


def test_empty_src_is_left_alone() -> None:
    root = parse_fragment('<img src="" width="4" height="5">')
    fix_images(root, BASE)
    img = root.xpath(".//img")[0]
    assert img.get("src") == ""
    assert img.get("width") == "4"
    assert img.get("height") == "5"
    assert img.get("style") is None
