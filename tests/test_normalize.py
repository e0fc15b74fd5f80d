from movie_resolver.normalize import (
    basic_clean,
    clean_whitespace,
    strip_html,
    strip_patterns,
    truncate,
    unique_nonempty,
)
from movie_resolver.utils.text_clean import clean_query_text


def test_strip_html_basic():
    html = "<p>Hello <b>world</b>!</p>"
    assert strip_html(html) == "Hello world!"


def test_strip_html_decodes_entities():
    assert strip_html("Tom &amp; Jerry &lt;3") == "Tom & Jerry <3"


def test_basic_clean_trims_whitespace_and_html():
    raw = "   <div>Hello \n\t  world</div>\n"
    assert basic_clean(raw) == "Hello world"


def test_basic_clean_handles_full_width_and_nbsp_spaces():
    assert basic_clean("阳光\u3000普照\u00a0 2019") == "阳光 普照 2019"


def test_clean_whitespace_is_idempotent():
    once = clean_whitespace("  a \n b  ")
    assert once == "a b"
    assert clean_whitespace(once) == once


def test_truncate_keeps_total_length():
    text = "x" * 600
    out = truncate(text, 500)
    assert len(out) == 500
    assert out.endswith("...")
    assert truncate("short", 500) == "short"


def test_strip_patterns_applies_in_order():
    assert strip_patterns("阳光普照 - 豆瓣电影", [r"\s*-\s*豆瓣电影$"]) == "阳光普照"


def test_unique_nonempty_dedups_and_drops_blanks():
    assert unique_nonempty(["剧情", " 剧情 ", "", "<b>家庭</b>"]) == ["剧情", "家庭"]


def test_clean_query_text():
    assert clean_query_text("  阳光   普照\n") == "阳光 普照"
    assert clean_query_text(None) == ""
    assert len(clean_query_text("a" * 500)) == 200
