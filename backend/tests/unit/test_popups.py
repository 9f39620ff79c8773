"""Unit tests: map_core.popups (popup markup and labels)."""
import pytest

from map_core.popups import PLACEHOLDER_TITLE, build_hover_label, build_label, build_popup, escape_text

pytestmark = pytest.mark.unit


def test_popup_contains_location_and_businesses():
    html = build_popup({
        "name": "TDN Menteng",
        "address": "Jl. Cokroaminoto 45",
        "businesses": [
            {"name": "Warung Bu Sri", "category": "Kuliner", "phone": "021-1", "description": "Nasi rames"},
            {"name": "Fotokopi Jaya", "category": "Jasa", "phone": "021-2", "active": False},
        ],
    })
    assert "TDN Menteng" in html
    assert "Jl. Cokroaminoto 45" in html
    assert "Warung Bu Sri" in html and "Kuliner" in html and "021-1" in html
    assert "Nasi rames" in html
    assert html.count("status-active") == 1
    assert html.count("status-inactive") == 1


def test_popup_placeholder_when_name_missing():
    html = build_popup({"address": "Jl. Pluit", "businesses": []})
    assert PLACEHOLDER_TITLE in html


def test_popup_omits_missing_description():
    html = build_popup({"name": "X", "address": "Y", "businesses": [{"name": "B", "category": "C", "phone": "1"}]})
    assert "business-description" not in html


def test_popup_escapes_markup():
    """Record text is escaped, never injected as markup."""
    html = build_popup({
        "name": "<script>alert(1)</script>",
        "address": "<b>bold</b>",
        "businesses": [{"name": "<img src=x onerror=alert(1)>", "category": "&", "phone": "\"1\""}],
    })
    assert "<script>" not in html
    assert "<img" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "&amp;" in html


def test_labels():
    loc = {"name": "TDN Menteng", "stage": "operational"}
    assert build_label(loc) == "TDN Menteng"
    assert build_hover_label(loc) == "TDN Menteng · Operational"


def test_hover_label_without_name_is_stage_only():
    assert build_label({"stage": "build"}) == ""
    assert build_hover_label({"stage": "build"}) == "Build"


def test_template_literal_characters_are_neutralised():
    html = build_popup({
        "name": "${alert(1)}",
        "address": "`whoami`",
        "businesses": [{"name": "C:\\toko", "category": "${x}"}],
    })
    assert "${" not in html
    assert "`" not in html
    assert "\\" not in html
    assert "&#36;{alert(1)}" in html
    assert "&#96;whoami&#96;" in html
    assert "C:&#92;toko" in html


def test_escape_text_keeps_plain_text():
    assert escape_text("Kopi & Teh <Menteng>") == "Kopi &amp; Teh &lt;Menteng&gt;"
