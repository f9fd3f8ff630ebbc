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

from __future__ import annotations

__all__ = ("Attribute", "Frame")

import dataclasses
from collections.abc import Iterable
from typing import Any, final

import numpy as np

from ._dtypes import AttributeKind, NumberType


@dataclasses.dataclass(frozen=True)
class Attribute:
    """A named, typed value attached to a frame and written as one header
    line.
    """

    name: str
    """Key written to the header (`str`)."""

    kind: AttributeKind
    """How the value is rendered (`AttributeKind`)."""

    value: Any
    """Value to render; interpreted according to `kind`."""

    @classmethod
    def infer(cls, name: str, value: Any) -> Attribute:
        """Construct an attribute, inferring its kind from the value.

        See `AttributeKind.infer` for the rules.
        """
        return cls(name, AttributeKind.infer(value), value)


@final
class Frame:
    """A typed pixel array with an ordered list of attributes, submitted to a
    `FrameFileSession` for writing.

    Parameters
    ----------
    array
        Pixel data.  Any shape is accepted; the data block holds the elements
        in C order.
    attributes, optional
        Attributes to attach, in the order they should appear in the header.
        Names need not be unique.

    Notes
    -----
    The array held by a frame is always a read-only, C-contiguous,
    little-endian view.  When the given array already satisfies those
    constraints no copy is made, but the caller's array is never made
    read-only itself.
    """

    def __init__(self, array: np.ndarray, /, attributes: Iterable[Attribute] = ()):
        array = np.ascontiguousarray(array)
        if array.dtype.byteorder == ">":
            array = array.astype(array.dtype.newbyteorder("<"))
        view = array.view()
        view.flags.writeable = False
        self._array = view
        self._attributes = tuple(attributes)

    @property
    def array(self) -> np.ndarray:
        """The read-only pixel array."""
        return self._array

    @property
    def shape(self) -> tuple[int, ...]:
        """Dimensions of the pixel array."""
        return self._array.shape

    @property
    def number_type(self) -> NumberType | None:
        """Pixel type, or `None` if it has no EDF equivalent."""
        return NumberType.from_numpy_or_none(self._array.dtype)

    @property
    def element_count(self) -> int:
        """Total number of pixels."""
        return self._array.size

    @property
    def bytes_per_element(self) -> int:
        """Size of one pixel in bytes."""
        return self._array.dtype.itemsize

    @property
    def nbytes(self) -> int:
        """Size of the data block written for this frame."""
        return self.element_count * self.bytes_per_element

    @property
    def buffer(self) -> memoryview:
        """Read-only, flat byte view of the pixel data."""
        return memoryview(self._array.reshape(-1).view(np.uint8))

    @property
    def attributes(self) -> tuple[Attribute, ...]:
        """Attributes in attachment order."""
        return self._attributes

    def with_attributes(self, *args: Attribute, **kwargs: Any) -> Frame:
        """Return a new frame sharing this one's pixels with additional
        attributes appended.

        Positional arguments must be `Attribute` instances; keyword arguments
        are converted with `Attribute.infer`, in the order given.
        """
        extra = list(args)
        extra.extend(Attribute.infer(name, value) for name, value in kwargs.items())
        return Frame(self._array, self._attributes + tuple(extra))

    def __str__(self) -> str:
        return f"Frame({list(self.shape)}, {self._array.dtype.name}, {len(self._attributes)} attributes)"

    def __repr__(self) -> str:
        return (
            f"Frame(..., shape={self.shape!r}, dtype={self._array.dtype!r}, "
            f"attributes={self._attributes!r})"
        )
