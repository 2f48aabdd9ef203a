from __future__ import annotations

import logging
import typing

from ._collections import HeaderFields
from .fields import _TYPE_HEADER_FORMATTER, format_header_param_quoted

log = logging.getLogger(__name__)

_TYPE_BODY = typing.Union[str, bytes, bytearray, memoryview]

CONTENT_DISPOSITION = "Content-Disposition"
CONTENT_TYPE = "Content-Type"
CRLF = "\r\n"


@typing.runtime_checkable
class ContentEntity(typing.Protocol):
    """
    Anything that can be placed inside a multipart body.

    A multipart container only reads ``headers`` and ``body``; callers build
    up the headers through ``set_value`` and ``set_attribute``.
    """

    headers: HeaderFields
    body: bytes

    def set_value(self, value: str, header_field: str) -> None:
        ...

    def set_attribute(self, attribute: str, value: str, header_field: str) -> None:
        ...


def _encode_text(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates can't be encoded; the part still gets built.
        log.debug("Text body is not valid UTF-8, using an empty body: %s", e)
        return b""


class Part:
    """
    A single part of a multipart body: an ordered set of header fields plus
    a raw payload.

    :param body:
        The payload. ``bytes`` (or any bytes-like object) is stored verbatim.
        ``str`` is encoded as UTF-8 and the ``Content-Type`` field gets a
        ``charset="utf-8"`` attribute, creating that field with an empty
        value when ``content_type`` is not given.
    :param content_type:
        An optional MIME type written to the ``Content-Type`` field. An empty
        string is written as given.
    :param header_formatter:
        An optional callable that is used to format header attributes. By
        default, this is :func:`~formpart.fields.format_header_param_quoted`.
    """

    def __init__(
        self,
        body: _TYPE_BODY = b"",
        content_type: typing.Optional[str] = None,
        header_formatter: _TYPE_HEADER_FORMATTER = format_header_param_quoted,
    ) -> None:
        if isinstance(body, str):
            data = _encode_text(body)
        elif isinstance(body, (bytes, bytearray, memoryview)):
            data = bytes(body)
        else:
            raise TypeError(
                f"Part body must be str or bytes, not {type(body).__name__}"
            )

        self.body = data
        self.headers = HeaderFields(header_formatter=header_formatter)

        if content_type is not None:
            self.set_value(content_type, CONTENT_TYPE)

        if isinstance(body, str):
            self.set_attribute("charset", "utf-8", CONTENT_TYPE)

    @classmethod
    def form_field(
        cls,
        name: str,
        value: typing.Union[str, bytes],
        header_formatter: _TYPE_HEADER_FORMATTER = format_header_param_quoted,
    ) -> Part:
        """
        A "multipart/form-data" part holding a form field and its value.

        The value is stored as UTF-8 bytes and no ``Content-Type`` is added.

        :param name:
            Field name from the form.
        :param value:
            Value from the form field.
        """
        data = _encode_text(value) if isinstance(value, str) else value
        part = cls(data, header_formatter=header_formatter)
        part.set_value("form-data", CONTENT_DISPOSITION)
        part.set_attribute("name", name, CONTENT_DISPOSITION)
        return part

    @classmethod
    def form_file(
        cls,
        name: str,
        file_data: typing.Union[str, bytes],
        filename: typing.Optional[str] = None,
        content_type: typing.Optional[str] = None,
        header_formatter: _TYPE_HEADER_FORMATTER = format_header_param_quoted,
    ) -> Part:
        """
        A "multipart/form-data" part holding file data.

        :param name:
            Field name from the form.
        :param file_data:
            Complete contents of the file. Text is stored as UTF-8 bytes.
        :param filename:
            Original local file name of the file.
        :param content_type:
            MIME type of the data. No charset is added.
        """
        data = _encode_text(file_data) if isinstance(file_data, str) else file_data
        part = cls(data, header_formatter=header_formatter)
        part.set_value("form-data", CONTENT_DISPOSITION)
        part.set_attribute("name", name, CONTENT_DISPOSITION)
        if filename is not None:
            part.set_attribute("filename", filename, CONTENT_DISPOSITION)
        if content_type is not None:
            part.set_value(content_type, CONTENT_TYPE)
        return part

    def set_value(self, value: str, header_field: str) -> None:
        """
        Sets the value of ``header_field``, dropping any attributes it had.
        """
        self.headers.set_value(value, header_field)

    def set_attribute(self, attribute: str, value: str, header_field: str) -> None:
        """
        Sets ``attribute`` on ``header_field``, creating the field with an
        empty value if it doesn't exist yet.
        """
        self.headers.set_attribute(attribute, value, header_field)

    def render_headers(self) -> str:
        """
        Renders the headers for this part, including the blank line that
        separates them from the body.
        """
        return self.headers.render() + CRLF

    def render(self) -> str:
        """
        Renders the headers followed by the body as text. A body that isn't
        valid UTF-8 is replaced by its size, e.g. ``(3 bytes)``.
        """
        try:
            text = self.body.decode("utf-8")
        except UnicodeDecodeError:
            text = f"({len(self.body)} bytes)"
        return self.render_headers() + text

    def copy(self) -> Part:
        clone = type(self)(self.body, header_formatter=self.headers.header_formatter)
        clone.headers = self.headers.copy()
        return clone

    def __eq__(self, other: object) -> bool:
        """
        Parts are equal when their bodies and header fields are equal. Header
        fields only compare equal under the same ``header_formatter``.
        """
        if not isinstance(other, Part):
            return NotImplemented
        return self.body == other.body and self.headers == other.headers

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(headers={list(self.headers)!r}, body={self.body!r})"
        )
