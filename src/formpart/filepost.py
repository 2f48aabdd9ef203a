from __future__ import annotations

import binascii
import codecs
import logging
import os
import re
import typing
from io import BytesIO

from .exceptions import BoundaryValueError
from .fields import guess_content_type
from .part import ContentEntity, Part, _encode_text

log = logging.getLogger(__name__)

writer = codecs.lookup("utf-8")[3]

_TYPE_FIELD_DATA = typing.Union[str, bytes]
_TYPE_FIELD_VALUE_TUPLE = typing.Union[
    _TYPE_FIELD_DATA,
    int,
    typing.Tuple[typing.Optional[str], _TYPE_FIELD_DATA],
    typing.Tuple[typing.Optional[str], _TYPE_FIELD_DATA, str],
]
_TYPE_PARTS_SEQUENCE = typing.Sequence[
    typing.Union[typing.Tuple[str, _TYPE_FIELD_VALUE_TUPLE], ContentEntity]
]
_TYPE_PARTS = typing.Union[
    _TYPE_PARTS_SEQUENCE,
    typing.Mapping[str, _TYPE_FIELD_VALUE_TUPLE],
]

# bchars from RFC 2046 section 5.1.1
_BOUNDARY_RE = re.compile(r"[0-9A-Za-z'()+_,\-./:=? ]+")
# token from RFC 2045 section 5.1
_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def choose_boundary() -> str:
    """
    Our embarrassingly-simple replacement for mimetools.choose_boundary.
    """
    return binascii.hexlify(os.urandom(16)).decode()


def check_boundary(boundary: str) -> None:
    """
    Raises :class:`~formpart.exceptions.BoundaryValueError` if ``boundary``
    can't delimit a multipart body.
    """
    if not boundary:
        raise BoundaryValueError(boundary, "must not be empty")
    if len(boundary) > 70:
        raise BoundaryValueError(boundary, "must not be longer than 70 characters")
    if not _BOUNDARY_RE.fullmatch(boundary):
        raise BoundaryValueError(boundary, "contains characters not allowed")
    if boundary.endswith(" "):
        raise BoundaryValueError(boundary, "must not end with a space")


def part_from_tuple(name: str, value: _TYPE_FIELD_VALUE_TUPLE) -> Part:
    """
    A :class:`~formpart.part.Part` factory from old-style tuple parameters.

    Supports a plain value or a (filename, data, MIME type) file tuple where
    the MIME type is optional. For example::

        'foo': 'bar',
        'fakefile': ('foofile.txt', 'contents of foofile'),
        'realfile': ('barfile.txt', open('realfile', 'rb').read()),
        'typedfile': ('bazfile.bin', open('bazfile', 'rb').read(), 'image/jpeg'),
        'nonamefile': 'contents of nonamefile field',

    When the MIME type is missing it is guessed from the filename.
    """
    filename: typing.Optional[str]
    content_type: typing.Optional[str]
    data: _TYPE_FIELD_DATA

    if isinstance(value, tuple):
        if len(value) == 3:
            filename, data, content_type = typing.cast(
                typing.Tuple[typing.Optional[str], _TYPE_FIELD_DATA, str], value
            )
        else:
            filename, data = typing.cast(
                typing.Tuple[typing.Optional[str], _TYPE_FIELD_DATA], value
            )
            content_type = guess_content_type(filename)

        if isinstance(data, str):
            data = _encode_text(data)

        return Part.form_file(name, data, filename=filename, content_type=content_type)

    if isinstance(value, int):
        value = str(value)  # Backwards compatibility

    return Part.form_field(name, value)


def iter_part_objects(parts: _TYPE_PARTS) -> typing.Iterable[ContentEntity]:
    """
    Iterate over parts.

    Supports list of (k, v) tuples and dicts, and lists of content entities
    such as :class:`~formpart.part.Part`.

    """
    iterable: typing.Iterable[
        typing.Union[ContentEntity, typing.Tuple[str, _TYPE_FIELD_VALUE_TUPLE]]
    ]

    if isinstance(parts, typing.Mapping):
        iterable = parts.items()
    else:
        iterable = parts

    for part in iterable:
        if isinstance(part, ContentEntity):
            yield part
        else:
            yield part_from_tuple(*part)


def encode_multipart(
    parts: _TYPE_PARTS,
    boundary: typing.Optional[str] = None,
    content_subtype: str = "form-data",
) -> typing.Tuple[bytes, str]:
    """
    Encode ``parts`` using the multipart MIME format.

    :param parts:
        Dictionary of fields, list of (key, value) tuples, or list of content
        entities such as :class:`~formpart.part.Part`.

    :param boundary:
        If not specified, then a random boundary will be generated using
        :func:`formpart.filepost.choose_boundary`.

    :param content_subtype:
        The multipart subtype announced in the returned content type.

    :ret:
        A ``(body, content_type)`` tuple, where ``content_type`` is the value
        for the request's ``Content-Type`` header.
    """
    body = BytesIO()
    if boundary is None:
        boundary = choose_boundary()
    else:
        check_boundary(boundary)

    count = 0
    for part in iter_part_objects(parts):
        body.write(f"--{boundary}\r\n".encode("latin-1"))

        writer(body).write(part.headers.render())
        body.write(b"\r\n")
        body.write(part.body)
        body.write(b"\r\n")
        count += 1

    body.write(f"--{boundary}--\r\n".encode("latin-1"))

    log.debug("Encoded %d parts with boundary %r", count, boundary)

    if not _TOKEN_RE.fullmatch(boundary):
        boundary = f'"{boundary}"'

    content_type = f"multipart/{content_subtype}; boundary={boundary}"

    return body.getvalue(), content_type
