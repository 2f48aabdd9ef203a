"""
Single parts of multipart HTTP bodies: header fields, parameter quoting and form-data helpers
"""

from __future__ import annotations

# Set default logging handler to avoid "No handler found" warnings.
import logging
import typing
from logging import NullHandler

from . import exceptions
from ._collections import HeaderFields
from ._version import __version__
from .fields import (
    HeaderField,
    format_header_param_html5,
    format_header_param_quoted,
    format_header_param_rfc2231,
    guess_content_type,
)
from .filepost import choose_boundary, encode_multipart
from .part import ContentEntity, Part

__license__ = "MIT"
__version__ = __version__

__all__ = (
    "ContentEntity",
    "HeaderField",
    "HeaderFields",
    "Part",
    "add_stderr_logger",
    "choose_boundary",
    "encode_multipart",
    "exceptions",
    "format_header_param_html5",
    "format_header_param_quoted",
    "format_header_param_rfc2231",
    "guess_content_type",
)

logging.getLogger(__name__).addHandler(NullHandler())


def add_stderr_logger(
    level: int = logging.DEBUG,
) -> logging.StreamHandler[typing.TextIO]:
    """
    Helper for quickly adding a StreamHandler to the logger. Useful for
    debugging.

    Returns the handler after adding it.
    """
    # This method needs to be in this __init__.py to get the __name__ correct
    # even if formpart is vendored within another package.
    logger = logging.getLogger(__name__)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.debug("Added a stderr logging handler to logger: %s", __name__)
    return handler


# ... Clean up.
del NullHandler
