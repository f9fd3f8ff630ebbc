# This file is part of lsst-edf.
#
# Developed for the LSST Data Management System.
# This product includes software developed by the LSST Project
# (https://www.lsst.org).
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Construction of the plain-text EDF header.

An EDF header has the form::

    \\n{EDF_DataBlockID = 1.Image.Psd ; \\r\\n
    EDF_HeaderSize = <size> ; \\r\\n
    ByteOrder = LowByteFirst ; \\r\\n
    Num_Images = <n> ; \\r\\n
    DataType = <type> ; \\r\\n
    <attribute> = <value> ; \\r\\n
    ...
    <padding>}\\n

where ``<size>`` is the total number of bytes in the header, including the
digits of ``<size>`` itself.  The raw data block follows immediately.
"""

from __future__ import annotations

__all__ = (
    "HEADER_END",
    "HEADER_PREFIX",
    "LINE_END",
    "HeaderPlan",
    "compose_header",
    "count_digits",
    "format_header_body",
    "resolve_header_size",
)

import dataclasses
from collections.abc import Iterable
from logging import getLogger
from typing import Self

from ._attribute_text import format_attribute_value
from ._config import SessionConfig
from ._dtypes import NumberType, edf_data_type_name
from ._frame import Attribute, Frame

_LOG = getLogger(__name__)

HEADER_PREFIX = b"\n{EDF_DataBlockID = 1.Image.Psd ; \r\nEDF_HeaderSize = "
"""Everything in the header before the digits of the size field."""

LINE_END = b" ; \r\n"
"""Terminator written after every value."""

HEADER_END = b"}\n"
"""Last bytes of the header, after any padding."""


def format_header_body(
    number_type: NumberType | None, attributes: Iterable[Attribute], num_images: int
) -> bytes:
    """Build the lines of the header that follow the size field.

    Parameters
    ----------
    number_type
        Pixel type of the data block, or `None` if unknown.
    attributes
        Attributes to write, one line each, in order.  Attributes whose
        values have no text form are skipped.
    num_images
        Value of the ``Num_Images`` key.

    Returns
    -------
    body
        UTF-8 encoded header lines.
    """
    lines = [
        "ByteOrder = LowByteFirst",
        f"Num_Images = {num_images}",
        f"DataType = {edf_data_type_name(number_type)}",
    ]
    for attribute in attributes:
        text = format_attribute_value(attribute.kind, attribute.value)
        if text is None:
            _LOG.debug("Skipping attribute %r with kind %s.", attribute.name, attribute.kind)
            continue
        lines.append(f"{attribute.name} = {text}")
    return b"".join(line.encode() + LINE_END for line in lines)


def count_digits(n: int) -> int:
    """Return the number of decimal digits needed to print a positive integer.

    Values less than one are treated as needing a single digit.
    """
    if n <= 0:
        return 1
    return len(str(n))


def resolve_header_size(fixed_size: int) -> int:
    """Compute the self-consistent value of the ``EDF_HeaderSize`` field.

    Parameters
    ----------
    fixed_size
        Size in bytes of everything in the header except the digits of the
        size field itself.

    Returns
    -------
    total_size
        ``fixed_size`` plus the number of digits needed to print the result.

    Notes
    -----
    Adding the digits can carry the total across a power of ten (e.g. 997
    fixed bytes need four digits, since 997 + 3 = 1000).  Each pass can add at
    most one digit, so two passes always reach the fixed point.
    """
    digits = count_digits(fixed_size)
    digits = count_digits(fixed_size + digits)
    return fixed_size + digits


@dataclasses.dataclass(frozen=True)
class HeaderPlan:
    """A fully resolved EDF header, ready to be written."""

    body: bytes
    """Header lines following the size field (`bytes`)."""

    total_size: int
    """Value written to the ``EDF_HeaderSize`` field (`int`)."""

    padding: int = 0
    """Number of spaces inserted before the closing brace (`int`)."""

    @classmethod
    def compose(cls, frame: Frame, config: SessionConfig, num_images: int | None = None) -> Self:
        """Plan the header for a file whose first frame is ``frame``.

        Parameters
        ----------
        frame
            Frame that provides the pixel type and attributes.
        config
            Session options; only ``minimum_header_size`` is used directly.
        num_images, optional
            Value of the ``Num_Images`` key; defaults to
            ``config.num_images``.

        Returns
        -------
        plan
            Resolved header.
        """
        if num_images is None:
            num_images = config.num_images
        body = format_header_body(frame.number_type, frame.attributes, num_images)
        return cls.from_body(body, config.minimum_header_size)

    @classmethod
    def from_body(cls, body: bytes, minimum_header_size: int = 0) -> Self:
        """Resolve the size field and padding for a header body.

        Parameters
        ----------
        body
            Header lines following the size field.
        minimum_header_size, optional
            Smallest total header size; zero for no minimum.

        Returns
        -------
        plan
            Resolved header.
        """
        fixed_size = len(HEADER_PREFIX) + len(LINE_END) + len(body) + len(HEADER_END)
        total_size = resolve_header_size(fixed_size)
        if minimum_header_size == 0 or total_size >= minimum_header_size:
            return cls(body=body, total_size=total_size)
        # minimum - digits(minimum) never decreases as minimum grows, and the
        # resolved size already fits, so this is never below zero.
        padding = max(minimum_header_size - fixed_size - count_digits(minimum_header_size), 0)
        return cls(body=body, total_size=minimum_header_size, padding=padding)

    @property
    def size_text(self) -> bytes:
        """Digits written to the ``EDF_HeaderSize`` field."""
        return str(self.total_size).encode()

    def to_bytes(self) -> bytes:
        """Return the exact bytes of the header."""
        return b"".join(
            [HEADER_PREFIX, self.size_text, LINE_END, self.body, b" " * self.padding, HEADER_END]
        )

    def __len__(self) -> int:
        return (
            len(HEADER_PREFIX)
            + len(self.size_text)
            + len(LINE_END)
            + len(self.body)
            + self.padding
            + len(HEADER_END)
        )


def compose_header(frame: Frame, config: SessionConfig, num_images: int | None = None) -> bytes:
    """Return the bytes of the header for a file whose first frame is
    ``frame``.

    See `HeaderPlan.compose` for parameters.
    """
    return HeaderPlan.compose(frame, config, num_images).to_bytes()
