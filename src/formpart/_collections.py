from __future__ import annotations

import typing

from .fields import _TYPE_HEADER_FORMATTER, HeaderField, format_header_param_quoted

__all__ = ["HeaderFields"]


class HeaderFields:
    """
    :param fields:
        An iterable of :class:`~formpart.fields.HeaderField`. Must not contain
        multiple field names when compared case-insensitively; later fields
        replace earlier ones.

    :param header_formatter:
        Callable used to format each attribute when the fields are rendered.
        Defaults to :func:`~formpart.fields.format_header_param_quoted`.

    An ordered container for the header fields of a single multipart part.

    Field names are stored and compared case-insensitively, and there is
    never more than one field per name. Setting the value of a field replaces
    the whole field (value and attributes) at its existing position, so the
    rendered order is always the order in which names were first seen.

    >>> headers = HeaderFields()
    >>> headers.set_value("form-data", "Content-Disposition")
    >>> headers.set_attribute("name", "avatar", "content-disposition")
    >>> headers["CONTENT-DISPOSITION"].get_attribute("name")
    'avatar'
    >>> headers.render()
    'Content-Disposition: form-data; name="avatar"\\r\\n'
    """

    def __init__(
        self,
        fields: typing.Optional[typing.Iterable[HeaderField]] = None,
        header_formatter: _TYPE_HEADER_FORMATTER = format_header_param_quoted,
    ) -> None:
        self._container: dict[str, HeaderField] = {}
        self.header_formatter = header_formatter
        if fields is not None:
            for field in fields:
                self._container[field.name.lower()] = field.copy()

    def set_value(self, value: str, name: str) -> None:
        """Replaces the field ``name`` with a new one holding ``value``."""
        self._container[name.lower()] = HeaderField(name, value)

    def set_attribute(self, attribute: str, value: str, name: str) -> None:
        """
        Sets ``attribute`` on the field ``name``. A missing field is created
        with an empty value first.
        """
        key = name.lower()
        field = self._container.get(key)
        if field is None:
            field = self._container[key] = HeaderField(name)
        field.set_attribute(attribute, value)

    def get(
        self, name: str, default: typing.Optional[HeaderField] = None
    ) -> typing.Optional[HeaderField]:
        return self._container.get(name.lower(), default)

    def discard(self, name: str) -> None:
        self._container.pop(name.lower(), None)

    def copy(self) -> HeaderFields:
        return type(self)(self, header_formatter=self.header_formatter)

    def render(self) -> str:
        """
        Renders the header block: one line per field, each terminated by
        CRLF. An empty container renders as an empty string.
        """
        return "".join(
            f"{field.render(self.header_formatter)}\r\n" for field in self
        )

    def __getitem__(self, name: str) -> HeaderField:
        return self._container[name.lower()]

    def __contains__(self, name: object) -> bool:
        if isinstance(name, str):
            return name.lower() in self._container
        return False

    def __iter__(self) -> typing.Iterator[HeaderField]:
        return iter(self._container.values())

    def __len__(self) -> int:
        return len(self._container)

    def __eq__(self, other: object) -> bool:
        """
        Equal when the fields match in order and the same ``header_formatter``
        is used, i.e. when both render identically.
        """
        if not isinstance(other, HeaderFields):
            return NotImplemented
        return (
            list(self) == list(other)
            and self.header_formatter == other.header_formatter
        )

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"
