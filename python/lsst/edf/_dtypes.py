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

__all__ = (
    "AttributeKind",
    "NumberType",
    "edf_data_type_name",
)

import enum

import numpy as np
import numpy.typing as npt


class NumberType(enum.StrEnum):
    """Enumeration of pixel value types that can be written to an EDF data
    block.
    """

    int8 = enum.auto()
    uint8 = enum.auto()
    int16 = enum.auto()
    uint16 = enum.auto()
    int32 = enum.auto()
    uint32 = enum.auto()
    float32 = enum.auto()
    float64 = enum.auto()

    def to_numpy(self) -> type:
        """Convert an enumeration member to the corresponding numpy scalar
        type object.

        Returns
        -------
        scalar_type
            Numpy scalar type, e.g. `numpy.int16`.
        """
        return getattr(np, self.value)

    @classmethod
    def from_numpy(cls, dtype: npt.DTypeLike) -> NumberType:
        """Construct an enumeration member from anything that can be coerced
        to `numpy.dtype`.

        Parameters
        ----------
        dtype
            Object convertible to `numpy.dtype`.

        Returns
        -------
        member
            Enumeration member.

        Raises
        ------
        ValueError
            Raised if the data type has no EDF equivalent.
        """
        return cls(np.dtype(dtype).name)

    @classmethod
    def from_numpy_or_none(cls, dtype: npt.DTypeLike) -> NumberType | None:
        """Like `from_numpy`, but return `None` for unsupported types."""
        try:
            return cls.from_numpy(dtype)
        except ValueError:
            return None


_EDF_DATA_TYPE_NAMES = {
    NumberType.int8: "SignedByte",
    NumberType.uint8: "UnsignedByte",
    NumberType.int16: "SignedShort",
    NumberType.uint16: "UnsignedShort",
    NumberType.int32: "SignedInteger",
    NumberType.uint32: "UnsignedInteger",
    NumberType.float32: "FloatValue",
    NumberType.float64: "DoubleValue",
}


def edf_data_type_name(number_type: NumberType | None) -> str:
    """Return the value of the ``DataType`` header key for a pixel type.

    Unknown types (including `None`) map to ``UnAssigned``.
    """
    return _EDF_DATA_TYPE_NAMES.get(number_type, "UnAssigned")  # type: ignore[arg-type]


class AttributeKind(enum.StrEnum):
    """Enumeration of the value types an attribute attached to a frame may
    have.
    """

    int8 = enum.auto()
    uint8 = enum.auto()
    int16 = enum.auto()
    uint16 = enum.auto()
    int32 = enum.auto()
    uint32 = enum.auto()
    float32 = enum.auto()
    float64 = enum.auto()
    string = enum.auto()
    undefined = enum.auto()

    @property
    def is_integer(self) -> bool:
        """Whether values of this kind are printed as decimal integers."""
        return self in _INTEGER_KINDS

    @property
    def is_float(self) -> bool:
        """Whether values of this kind are printed as floating point."""
        return self is AttributeKind.float32 or self is AttributeKind.float64

    def to_numpy(self) -> type:
        """Return the numpy scalar type for a numeric kind.

        Raises
        ------
        TypeError
            Raised for `string` and `undefined`.
        """
        if self.is_integer or self.is_float:
            return getattr(np, self.value)
        raise TypeError(f"Attribute kind {self} has no numpy equivalent.")

    @classmethod
    def infer(cls, value: object) -> AttributeKind:
        """Guess the kind of an attribute from its Python value.

        Parameters
        ----------
        value
            Attribute value.  Strings and bytes map to `string`, Python
            `bool` and `int` to `int32` (or `uint32` if only that can hold
            it, and `string` if neither can), Python `float` to `float64`,
            and numpy scalars to the kind with the same name as their dtype.

        Returns
        -------
        kind
            Inferred kind; `undefined` if nothing matched.
        """
        match value:
            case str() | bytes():
                return cls.string
            case np.generic():
                try:
                    kind = cls(value.dtype.name)
                except ValueError:
                    return cls.undefined
                return kind
            case bool() | int():
                if -(2**31) <= value < 2**31:
                    return cls.int32
                if 0 <= value < 2**32:
                    return cls.uint32
                return cls.string
            case float():
                return cls.float64
        return cls.undefined


_INTEGER_KINDS = frozenset(
    {
        AttributeKind.int8,
        AttributeKind.uint8,
        AttributeKind.int16,
        AttributeKind.uint16,
        AttributeKind.int32,
        AttributeKind.uint32,
    }
)
