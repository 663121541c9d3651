import pytest

from keyten.cli.prompt import EditMode, Prompt


def test_left_and_right():
    p = Prompt()
    assert p.render_left() == "\U0001D55C "
    assert p.render_right() == ""


def test_multiline_indicator():
    assert Prompt().render_multiline_indicator() == "\u00b7 "


def test_mode_indicators():
    p = Prompt()
    assert p.render_indicator(EditMode.DEFAULT) == ""
    assert p.render_indicator(EditMode.EMACS) == ""
    assert p.render_indicator(EditMode.VI_NORMAL) == "[N] "
    assert p.render_indicator(EditMode.VI_INSERT) == "[I] "


def test_custom_mode_wraps_name():
    p = Prompt()
    out = p.render_indicator(EditMode.CUSTOM, "sel")
    assert out.startswith("(") and out.endswith(") ")
    assert "sel" in out


def test_custom_mode_without_name():
    with pytest.raises(ValueError):
        Prompt().render_indicator(EditMode.CUSTOM)


def test_history_search_indicator():
    p = Prompt()
    passing = p.render_history_search_indicator("foo")
    failing = p.render_history_search_indicator("foo", failing=True)
    assert passing == "(reverse-i-search: foo) "
    assert failing == "((failing) reverse-i-search: foo) "