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

__all__ = ("MAX_STRING_BYTES", "format_attribute_value")

import math
from typing import Any

import numpy as np

from ._dtypes import AttributeKind

MAX_STRING_BYTES = 256
"""Size of the buffer string attribute values are copied into, including a
terminator; at most ``MAX_STRING_BYTES - 1`` bytes of text survive.
"""


def format_attribute_value(kind: AttributeKind, value: Any) -> str | None:
    """Render an attribute value as header text.

    Parameters
    ----------
    kind
        Kind of the attribute.
    value
        Value to render.  Numeric values are first converted to the native
        type of ``kind``.

    Returns
    -------
    text
        Canonical text for the value, or `None` if ``kind`` has no textual
        form (the attribute should then be left out of the header).

    Notes
    -----
    Integers are printed in decimal.  Floating-point values use the shortest
    representation that round-trips at the kind's native precision, so a
    ``float32`` of ``0.1`` prints as ``0.1``, not ``0.10000000149011612``.
    Strings are not escaped in any way.
    """
    if kind.is_integer:
        return str(int(_to_native(kind, value)))
    if kind.is_float:
        return str(_to_native(kind, value))
    if kind is AttributeKind.string:
        return _truncate_text(value)
    return None


def _to_native(kind: AttributeKind, value: Any) -> np.generic:
    scalar_type = kind.to_numpy()
    if isinstance(value, int):
        if kind.is_integer:
            # Wrap to the native width like a C cast; numpy raises for Python
            # ints that do not fit in 64 bits.
            bits = np.dtype(scalar_type).itemsize * 8
            value &= (1 << bits) - 1
            if np.issubdtype(scalar_type, np.signedinteger) and value >= 1 << (bits - 1):
                value -= 1 << bits
        else:
            try:
                value = float(value)
            except OverflowError:
                value = math.inf if value > 0 else -math.inf
    return np.asarray(value).astype(scalar_type)[()]


def _truncate_text(value: Any) -> str:
    if isinstance(value, bytes):
        raw = value
    else:
        raw = str(value).encode()
    # Drop any multi-byte character cut in half at the boundary.
    return raw[: MAX_STRING_BYTES - 1].decode(errors="ignore")
