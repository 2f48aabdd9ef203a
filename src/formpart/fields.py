from __future__ import annotations

import email.utils
import mimetypes
import re
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

_TYPE_ATTRIBUTE = Tuple[str, str]
_TYPE_HEADER_FORMATTER = Callable[[str, str], str]


def guess_content_type(
    filename: Optional[str], default: str = "application/octet-stream"
) -> str:
    """
    Guess the "Content-Type" of a file.

    :param filename:
        The filename to guess the "Content-Type" of using :mod:`mimetypes`.
    :param default:
        If no "Content-Type" can be guessed, default to `default`.
    """
    if filename:
        return mimetypes.guess_type(filename)[0] or default
    return default


def _replace_multiple(value: str, needles_and_replacements: Mapping[str, str]) -> str:
    def replacer(match: re.Match[str]) -> str:
        return needles_and_replacements[match.group(0)]

    pattern = re.compile(
        r"|".join([re.escape(needle) for needle in needles_and_replacements.keys()])
    )

    result = pattern.sub(replacer, value)

    return result


# A header line can't carry these, even inside a quoted-string.
_HEADER_LINE_REPLACEMENTS = {
    "\u0000": "%00",
    "\u000A": "%0A",
    "\u000D": "%0D",
}

_QUOTED_STRING_REPLACEMENTS = {
    # Replace "\" with "\\".
    "\u005C": "\u005C\u005C",
    # Replace '"' with '\"'.
    "\u0022": "\u005C\u0022",
}
_QUOTED_STRING_REPLACEMENTS.update(_HEADER_LINE_REPLACEMENTS)


def format_header_param_quoted(name: str, value: str) -> str:
    """
    Format a single header parameter as a MIME quoted-string.

    The value is always wrapped in double quotes. Backslashes and double
    quotes are escaped as quoted-pairs, so any MIME parameter parser gets the
    original value back. CR, LF and NUL are percent-encoded since a header
    line can't contain them. Non-ASCII text is passed through unchanged.

    :param name:
        The name of the parameter, a string expected to be ASCII only.
    :param value:
        The raw value of the parameter.
    :ret:
        A string of the form ``name="value"``.
    """
    value = _replace_multiple(value, _QUOTED_STRING_REPLACEMENTS)

    return f'{name}="{value}"'


def format_header_param_rfc2231(name: str, value: str) -> str:
    """
    Helper function to format and quote a single header parameter using the
    strategy defined in RFC 2231.

    Particularly useful for header parameters which might contain
    non-ASCII values, like file names. This follows
    `RFC 2388 Section 4.4 <https://tools.ietf.org/html/rfc2388#section-4.4>`_.

    :param name:
        The name of the parameter, a string expected to be ASCII only.
    :param value:
        The raw value of the parameter.
    :ret:
        An RFC-2231-formatted unicode string.
    """
    if not any(ch in value for ch in '"\\\r\n'):
        result = f'{name}="{value}"'
        try:
            result.encode("ascii")
        except UnicodeEncodeError:
            pass
        else:
            return result

    value = email.utils.encode_rfc2231(value, "utf-8")
    value = f"{name}*={value}"

    return value


_HTML5_REPLACEMENTS = {
    "\u0022": "%22",
    # Replace "\" with "\\".
    "\u005C": "\u005C\u005C",
}

# All control characters from 0x00 to 0x1F *except* 0x1B.
_HTML5_REPLACEMENTS.update(
    {chr(cc): f"%{cc:02X}" for cc in range(0x00, 0x1F + 1) if cc not in (0x1B,)}
)


def format_header_param_html5(name: str, value: str) -> str:
    """
    Helper function to format and quote a single header parameter using the
    HTML5 strategy.

    Particularly useful for header parameters which might contain
    non-ASCII values, like file names. This follows the `HTML5 Working Draft
    Section 4.10.22.7`_ and matches the behavior of curl and modern browsers.

    .. _HTML5 Working Draft Section 4.10.22.7:
        https://w3c.github.io/html/sec-forms.html#multipart-form-data

    :param name:
        The name of the parameter, a string expected to be ASCII only.
    :param value:
        The raw value of the parameter.
    :ret:
        A unicode string, stripped of troublesome characters.
    """
    value = _replace_multiple(value, _HTML5_REPLACEMENTS)

    return f'{name}="{value}"'


class HeaderField:
    """
    A single header field of a multipart part, e.g.
    ``Content-Disposition: form-data; name="avatar"``.

    Attributes (the ``; key="value"`` parameters) keep their insertion order
    and are matched case-insensitively. Their values are stored raw and only
    quoted when the field is rendered.

    :param name:
        The name of the header field, e.g. ``Content-Type``.
    :param value:
        The value in front of the attributes. May be empty.
    :param attributes:
        An optional iterable of ``(attribute, value)`` pairs.
    """

    def __init__(
        self,
        name: str,
        value: str = "",
        attributes: Optional[Iterable[_TYPE_ATTRIBUTE]] = None,
    ) -> None:
        self.name = name
        self.value = value
        self._attributes: Dict[str, _TYPE_ATTRIBUTE] = {}
        if attributes:
            for attribute, attribute_value in attributes:
                self.set_attribute(attribute, attribute_value)

    @property
    def attributes(self) -> List[_TYPE_ATTRIBUTE]:
        """The ``(attribute, value)`` pairs in render order."""
        return list(self._attributes.values())

    def set_attribute(self, attribute: str, value: str) -> None:
        """
        Sets ``attribute`` to ``value``, replacing an attribute of the same
        name in place or appending a new one.
        """
        self._attributes[attribute.lower()] = (attribute, value)

    def get_attribute(
        self, attribute: str, default: Optional[str] = None
    ) -> Optional[str]:
        try:
            return self._attributes[attribute.lower()][1]
        except KeyError:
            return default

    def copy(self) -> HeaderField:
        return type(self)(self.name, self.value, self.attributes)

    def render(
        self, header_formatter: _TYPE_HEADER_FORMATTER = format_header_param_quoted
    ) -> str:
        """
        Renders this field as a single header line, without the line
        terminator. CR, LF and NUL in the name and value are percent-encoded
        so the field always stays on one line.
        """
        parts = [_replace_multiple(self.value, _HEADER_LINE_REPLACEMENTS)]
        parts.extend(header_formatter(name, value) for name, value in self.attributes)
        name = _replace_multiple(self.name, _HEADER_LINE_REPLACEMENTS)
        return f"{name}: {'; '.join(parts)}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderField):
            return NotImplemented
        return (
            self.name.lower() == other.name.lower()
            and self.value == other.value
            and self._keyed_attributes() == other._keyed_attributes()
        )

    def _keyed_attributes(self) -> List[_TYPE_ATTRIBUTE]:
        return [(key, value) for key, (_, value) in self._attributes.items()]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.name!r}, {self.value!r}, {self.attributes!r})"
        )
