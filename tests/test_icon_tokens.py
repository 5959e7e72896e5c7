import pytest

from utils.icon_tokens import (
    extract_icon_names,
    make_icon_token,
    map_icon_tokens,
    render_icon_tokens,
    strip_icon_tokens,
)


def test_extract_icon_names():
    assert extract_icon_names("$(rocket) Deploy $(cloud)") == ["rocket", "cloud"]
    assert extract_icon_names("") == []
    assert extract_icon_names("no $ (tokens)") == []


def test_render_known_and_unknown():
    assert render_icon_tokens("$(home)") == "\U0001F3E0"
    assert render_icon_tokens("$(nope) Build") == "Build"
    assert render_icon_tokens("$(zap) Fast") == "⚡ Fast"


def test_strip_icon_tokens():
    assert strip_icon_tokens("$(zap) Fast  run") == "Fast run"


def test_map_icon_tokens():
    assert map_icon_tokens("a $(x) b", str.upper) == "a X b"
    assert map_icon_tokens("", str.upper) == ""


def test_make_icon_token():
    assert make_icon_token("gear") == "$(gear)"
    with pytest.raises(ValueError):
        make_icon_token("a)b")
    with pytest.raises(ValueError):
        make_icon_token("")
