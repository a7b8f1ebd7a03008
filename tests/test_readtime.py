import pytest
from bs4 import BeautifulSoup

from read_tools_server.readtime import (
    count_words,
    estimate_reading_time,
    format_number,
    render_readtime,
)


def words(n):
    return " ".join(["word"] * n)


def test_count_words_ignores_markup_and_shortcodes():
    content = '<p>One <strong>two</strong> three</p>[gallery ids="1,2"]<script>var x</script>'
    assert count_words(content) == 3


def test_count_words_keeps_contractions_together():
    assert count_words("Don't stop the well-known tune") == 5


def test_estimate_rounds_up_to_half_minute():
    estimate = estimate_reading_time(words(200), wpm=180)

    assert estimate.words == 200
    assert estimate.exact_minutes == 1.11
    assert estimate.display_minutes == 1.5


def test_estimate_exact_half():
    assert estimate_reading_time(words(90), wpm=180).display_minutes == 0.5


@pytest.mark.parametrize("wpm", [0, -10])
def test_invalid_wpm_falls_back_to_default(wpm):
    assert estimate_reading_time(words(180), wpm=wpm).exact_minutes == 1.0


def test_empty_content():
    estimate = estimate_reading_time("")
    assert estimate.words == 0
    assert estimate.display_minutes == 0


@pytest.mark.parametrize(
    "locale, expected",
    [
        ("en_US", "1,234.50"),
        ("de_DE", "1.234,50"),
        ("fr_FR", "1 234,50"),
        ("es_MX", "1,234.50"),
    ],
)
def test_format_number(locale, expected):
    assert format_number(1234.5, 2, locale) == expected


def test_render_without_trigger():
    markup = render_readtime(5, words(360))
    soup = BeautifulSoup(markup, "html.parser")

    line = soup.select_one("div.readtime span.read-time-line")
    assert line.get_text(strip=True) == "2.0 min read"
    assert line["title"] == "Estimated reading time: 2.00 minutes"
    assert soup.select_one("a.read-aloud-trigger") is None


def test_render_with_trigger():
    markup = render_readtime(
        12,
        words(10),
        read_aloud=True,
        css_class="my-time",
        link_text="Listen <now>",
        icon_class="  fas   fa-volume-up ",
    )
    soup = BeautifulSoup(markup, "html.parser")

    trigger = soup.select_one("div.my-time a.read-aloud-trigger")
    assert trigger["data-post-id"] == "12"
    assert trigger.get_text(strip=True) == "Listen <now>"
    assert trigger.i["class"] == ["fas", "fa-volume-up"]
