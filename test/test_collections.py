from __future__ import annotations

import pytest

from formpart._collections import HeaderFields
from formpart.fields import HeaderField, format_header_param_html5


@pytest.fixture()
def headers() -> HeaderFields:
    h = HeaderFields()
    h.set_value("form-data", "Content-Disposition")
    h.set_attribute("name", "avatar", "Content-Disposition")
    h.set_value("image/png", "Content-Type")
    return h


class TestHeaderFields:
    def test_empty(self) -> None:
        h = HeaderFields()
        assert len(h) == 0
        assert list(h) == []
        assert h.render() == ""

    def test_set_value_case_insensitive(self) -> None:
        h = HeaderFields()
        h.set_value("text/plain", "Content-Type")
        h.set_value("image/png", "content-type")

        assert len(h) == 1
        assert h["CONTENT-TYPE"].value == "image/png"
        # Latest spelling wins.
        assert h.render() == "content-type: image/png\r\n"

    def test_set_value_drops_attributes(self) -> None:
        h = HeaderFields()
        h.set_value("text/plain", "Content-Type")
        h.set_attribute("charset", "utf-8", "Content-Type")
        h.set_value("image/png", "Content-Type")

        assert h["Content-Type"].attributes == []

    def test_set_value_keeps_position(self, headers: HeaderFields) -> None:
        headers.set_value("inline", "content-disposition")

        assert [field.name for field in headers] == [
            "content-disposition",
            "Content-Type",
        ]

    def test_set_attribute_creates_field(self) -> None:
        h = HeaderFields()
        h.set_attribute("charset", "utf-8", "Content-Type")

        field = h["Content-Type"]
        assert field.value == ""
        assert field.attributes == [("charset", "utf-8")]

    def test_set_attribute_replaces(self, headers: HeaderFields) -> None:
        headers.set_attribute("NAME", "other", "content-disposition")

        field = headers["Content-Disposition"]
        assert field.name == "Content-Disposition"
        assert field.get_attribute("name") == "other"
        assert len(field.attributes) == 1

    def test_set_attribute_appends_field_at_end(self, headers: HeaderFields) -> None:
        headers.set_attribute("foo", "bar", "X-Extra")

        assert [field.name for field in headers] == [
            "Content-Disposition",
            "Content-Type",
            "X-Extra",
        ]

    def test_get(self, headers: HeaderFields) -> None:
        assert headers.get("content-type") == HeaderField("Content-Type", "image/png")
        assert headers.get("Content-Location") is None

    def test_getitem_missing(self, headers: HeaderFields) -> None:
        with pytest.raises(KeyError):
            headers["Content-Location"]

    def test_contains(self, headers: HeaderFields) -> None:
        assert "content-type" in headers
        assert "CONTENT-DISPOSITION" in headers
        assert "Content-Location" not in headers
        assert 1 not in headers

    def test_discard(self, headers: HeaderFields) -> None:
        headers.discard("content-type")
        headers.discard("Content-Location")

        assert "Content-Type" not in headers
        assert len(headers) == 1

    def test_copy_is_independent(self, headers: HeaderFields) -> None:
        clone = headers.copy()
        clone.set_attribute("name", "changed", "Content-Disposition")
        clone.set_value("text/plain", "Content-Type")

        assert headers["Content-Disposition"].get_attribute("name") == "avatar"
        assert headers["Content-Type"].value == "image/png"
        assert clone.header_formatter is headers.header_formatter

    def test_init_from_fields(self) -> None:
        h = HeaderFields(
            [
                HeaderField("Content-Type", "text/plain"),
                HeaderField("X-Extra", "1"),
                HeaderField("content-type", "image/png"),
            ]
        )

        assert [field.value for field in h] == ["image/png", "1"]

    def test_render(self, headers: HeaderFields) -> None:
        assert headers.render() == (
            'Content-Disposition: form-data; name="avatar"\r\n'
            "Content-Type: image/png\r\n"
        )
        assert str(headers) == headers.render()

    def test_render_with_formatter(self) -> None:
        h = HeaderFields(header_formatter=format_header_param_html5)
        h.set_value("form-data", "Content-Disposition")
        h.set_attribute("filename", 'a"b', "Content-Disposition")

        assert h.render() == 'Content-Disposition: form-data; filename="a%22b"\r\n'

    def test_equality(self, headers: HeaderFields) -> None:
        other = HeaderFields()
        other.set_value("form-data", "content-disposition")
        other.set_attribute("NAME", "avatar", "content-disposition")
        other.set_value("image/png", "content-type")

        assert headers == other
        assert headers != HeaderFields()
        assert headers != {"Content-Type": "image/png"}

    def test_equality_is_ordered(self) -> None:
        a = HeaderFields([HeaderField("A", "1"), HeaderField("B", "2")])
        b = HeaderFields([HeaderField("B", "2"), HeaderField("A", "1")])

        assert a != b

    def test_equality_compares_formatter(self, headers: HeaderFields) -> None:
        html5 = HeaderFields(headers, header_formatter=format_header_param_html5)

        assert list(html5) == list(headers)
        assert html5 != headers
        assert html5 == html5.copy()

    def test_repr(self) -> None:
        h = HeaderFields([HeaderField("Content-Type", "image/png")])
        assert repr(h) == "HeaderFields([HeaderField('Content-Type', 'image/png', [])])"
