from __future__ import annotations

from core.html_tree import parse_fragment
from client.snippets import find_best_block, find_note_snippet, normalize_text

NOTES = """<div><p>Mount Tabor: a mountain in Galilee.</p>
<p>It recurs in 3.05.</p>
<p>And again in 4.01.</p>
<p>See also Ararat.</p>
<p>Fifth line.</p></div>
<ul><li>Ararat: where the Ark landed.</li></ul>"""


def _notes():
    return parse_fragment(NOTES, wrapper_id="notes-root")


def test_normalize_text() -> None:
    assert normalize_text("  Mount\n\tTABOR  ") == "mount tabor"
    assert normalize_text(None) == ""


def test_best_block_is_the_most_specific() -> None:
    best = find_best_block("mount   TABOR", _notes())
    # 外层 div 也包含该短语，但更长
    assert best.tag == "p"
    assert best.text == "Mount Tabor: a mountain in Galilee."


def test_snippet_includes_at_most_three_following_blocks() -> None:
    snippet = find_note_snippet("Mount Tabor", _notes())
    parts = snippet.split("\n")
    assert parts == [
        "<p>Mount Tabor: a mountain in Galilee.</p>",
        "<p>It recurs in 3.05.</p>",
        "<p>And again in 4.01.</p>",
        "<p>See also Ararat.</p>",
    ]


def test_snippet_stops_at_empty_sibling() -> None:
    root = parse_fragment("<p>Galilee is north.</p><p> </p><p>Unrelated.</p>")
    assert find_note_snippet("galilee", root) == "<p>Galilee is north.</p>"


def test_snippet_at_end_of_siblings() -> None:
    snippet = find_note_snippet("where the ark", _notes())
    assert snippet == "<li>Ararat: where the Ark landed.</li>"


def test_ties_go_to_the_earlier_block() -> None:
    root = parse_fragment("<p>Tabor one</p><p>Tabor two</p>")
    assert find_best_block("tabor", root).text == "Tabor one"


def test_no_match() -> None:
    assert find_note_snippet("Viskovatov", _notes()) == ""
    assert find_note_snippet("", _notes()) == ""
    assert find_note_snippet("   ", _notes()) == ""
    assert find_note_snippet("Mount Tabor", None) == ""
