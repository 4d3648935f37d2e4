import io

import pytest

from ctrlgen.helpdocs import Argument, DetailedHelp, FieldHelp, MarkerDoc
from ctrlgen.markerhelp import (
    field_syntax_help,
    marker_syntax_help,
    markers_details,
    markers_summary,
)


@pytest.fixture(autouse=True)
def plain_terminal(monkeypatch):
    monkeypatch.setenv("TERM", "dumb")


def render(span):
    buf = io.StringIO()
    span.write_to(buf)
    return buf.getvalue()


def _field(name, kind="string", optional=False, summary="", details=""):
    return FieldHelp(name, Argument(kind, optional=optional), DetailedHelp(summary, details))


def test_field_syntax_required():
    assert render(field_syntax_help(_field("name"))) == "name=<string>"


def test_field_syntax_optional_wraps_required():
    required = render(field_syntax_help(_field("max", "int")))
    optional = render(field_syntax_help(_field("max", "int", optional=True)))
    assert optional == "[" + required + "]"


def test_field_syntax_slice():
    arg = FieldHelp("items", Argument("slice", item_type=Argument("string")))
    assert "<[]string>" in render(field_syntax_help(arg))


def test_field_syntax_visual_length_matches_text():
    span = field_syntax_help(_field("max", "int", optional=True))
    assert span.visual_length() == len(render(span))


def test_marker_syntax_empty():
    assert render(marker_syntax_help(MarkerDoc("kubebuilder:object:root", "type"))) == (
        "+kubebuilder:object:root"
    )


def test_marker_syntax_named_fields():
    f1 = _field("a")
    f2 = _field("b", "int", optional=True)
    doc = MarkerDoc("m", "field", fields=[f1, f2])
    expected = "+m:" + render(field_syntax_help(f1)) + ",[b=<int>]"
    assert render(marker_syntax_help(doc)) == expected


def test_marker_syntax_anonymous_has_no_colon():
    anon = _field("", "bool")
    doc = MarkerDoc("object", "package", fields=[anon])
    assert render(marker_syntax_help(doc)) == "+object" + render(field_syntax_help(anon))


def test_summary_aligns_columns():
    markers = [
        MarkerDoc("a", "tgt1", DetailedHelp("first")),
        MarkerDoc("longername", "tgt2", DetailedHelp("second")),
    ]
    text = render(markers_summary("Group", markers))
    assert text.startswith("\nGroup\n\n")
    assert text.endswith("\n")
    rows = [r for r in text.split("\n") if "tgt" in r]
    assert len(rows) == 2
    assert rows[0].index("tgt1") == rows[1].index("tgt2")
    assert rows[0].index("first") == rows[1].index("second")


def test_summary_mentions_replacement_for_deprecated():
    doc = MarkerDoc("old", "type", DetailedHelp("does it"), deprecated_in_favor_of="new:one")
    text = render(markers_summary("G", [doc]))
    assert "(use new:one) does it" in text


def test_details_empty_marker():
    text = render(markers_details(True, "G", [MarkerDoc("m", "target", DetailedHelp("sum"))]))
    assert text.startswith("\nG\n\n")
    assert "\n+m target\n\tsum\n" in text


def test_details_full_includes_field_details():
    fields = [_field("x", summary="x summary", details="x details")]
    doc = MarkerDoc("m", "field", DetailedHelp("sum", "marker details"), fields=fields)
    text = render(markers_details(True, "G", [doc]))
    assert "\tmarker details" in text
    assert "\t" + render(field_syntax_help(fields[0])) in text
    assert "\t\tx summary" in text
    assert "\t\tx details" in text


def test_details_brief_omits_details():
    fields = [_field("x", summary="x summary", details="x details")]
    doc = MarkerDoc("m", "field", DetailedHelp("sum", "marker details"), fields=fields)
    text = render(markers_details(False, "G", [doc]))
    assert "x summary" in text
    assert "x details" not in text
    assert "marker details" not in text


def test_details_anonymous_field():
    anon = _field("", "bool")
    doc = MarkerDoc("object", "package", DetailedHelp("enables"), fields=[anon])
    text = render(markers_details(False, "G", [doc]))
    assert "\t" + render(field_syntax_help(anon)) + "  enables" in text
    assert text.endswith("\n")