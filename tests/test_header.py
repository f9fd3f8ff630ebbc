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

import unittest

import numpy as np

from lsst.edf import (
    HEADER_END,
    HEADER_PREFIX,
    LINE_END,
    Attribute,
    AttributeKind,
    Frame,
    HeaderPlan,
    NumberType,
    SessionConfig,
    compose_header,
    count_digits,
    edf_data_type_name,
    format_header_body,
    resolve_header_size,
)
from lsst.edf.tests import split_header


class HeaderSizeTestCase(unittest.TestCase):
    """Tests for the self-referential header size computation."""

    def test_count_digits(self) -> None:
        self.assertEqual(count_digits(1), 1)
        self.assertEqual(count_digits(9), 1)
        self.assertEqual(count_digits(10), 2)
        self.assertEqual(count_digits(999), 3)
        self.assertEqual(count_digits(1000), 4)
        self.assertEqual(count_digits(0), 1)
        self.assertEqual(count_digits(-5), 1)

    def test_resolve_header_size(self) -> None:
        self.assertEqual(resolve_header_size(8), 9)
        self.assertEqual(resolve_header_size(9), 11)
        self.assertEqual(resolve_header_size(96), 98)
        self.assertEqual(resolve_header_size(97), 99)
        self.assertEqual(resolve_header_size(98), 101)
        self.assertEqual(resolve_header_size(996), 999)
        self.assertEqual(resolve_header_size(997), 1001)
        self.assertEqual(resolve_header_size(9995), 9999)
        self.assertEqual(resolve_header_size(9996), 10001)
        for fixed_size in range(1, 20000):
            total = resolve_header_size(fixed_size)
            self.assertEqual(total, fixed_size + len(str(total)))

    def test_declared_size_matches_length(self) -> None:
        """The size field equals the emitted length for every body length
        across the 10/100/1000/10000 digit transitions.
        """
        for n in range(0, 10_050):
            plan = HeaderPlan.from_body(b"x" * n)
            data = plan.to_bytes()
            self.assertEqual(len(data), plan.total_size, msg=f"body length {n}")
            self.assertEqual(len(plan), plan.total_size)
            self.assertEqual(plan.padding, 0)
            self.assertTrue(data.startswith(HEADER_PREFIX + plan.size_text + LINE_END))
            self.assertTrue(data.endswith(HEADER_END))

    def test_minimum_not_reached(self) -> None:
        body = b"Key = value ; \r\n" * 20
        unconstrained = HeaderPlan.from_body(body)
        for minimum in [1, 2, 100, unconstrained.total_size - 1, unconstrained.total_size]:
            self.assertEqual(HeaderPlan.from_body(body, minimum), unconstrained)
            self.assertEqual(HeaderPlan.from_body(body, minimum).to_bytes(), unconstrained.to_bytes())

    def test_minimum_padding(self) -> None:
        for n in [0, 10, 500, 937, 938, 939, 940]:
            body = b"y" * n
            unconstrained = HeaderPlan.from_body(body)
            for minimum in range(unconstrained.total_size + 1, unconstrained.total_size + 1200, 7):
                plan = HeaderPlan.from_body(body, minimum)
                data = plan.to_bytes()
                self.assertEqual(len(data), minimum)
                self.assertEqual(plan.total_size, minimum)
                self.assertEqual(plan.size_text, str(minimum).encode())
                self.assertEqual(data[-(plan.padding + 2) :], b" " * plan.padding + b"}\n")

    def test_padding_never_negative(self) -> None:
        """Every minimum just above the resolved size, including ones that
        add a digit to the size field, is met exactly without clamping.
        """
        for n in range(880, 960):
            body = b"p" * n
            natural = HeaderPlan.from_body(body).total_size
            for minimum in range(natural + 1, natural + 30):
                plan = HeaderPlan.from_body(body, minimum)
                self.assertGreaterEqual(plan.padding, 0)
                self.assertEqual(len(plan.to_bytes()), minimum, msg=f"body {n}, minimum {minimum}")

    def test_minimum_crossing_digit_count(self) -> None:
        # A 998-byte natural header padded to 1000 bytes gains a digit in its
        # size field, which must come out of the padding.
        body = b"z" * (998 - 3 - len(HEADER_PREFIX) - len(LINE_END) - len(HEADER_END))
        self.assertEqual(HeaderPlan.from_body(body).total_size, 998)
        plan = HeaderPlan.from_body(body, 1000)
        self.assertEqual(len(plan.to_bytes()), 1000)
        self.assertEqual(plan.padding, 1)


class HeaderContentTestCase(unittest.TestCase):
    """Tests for the content of composed headers."""

    def test_data_type_names(self) -> None:
        expected = {
            np.int8: "SignedByte",
            np.uint8: "UnsignedByte",
            np.int16: "SignedShort",
            np.uint16: "UnsignedShort",
            np.int32: "SignedInteger",
            np.uint32: "UnsignedInteger",
            np.float32: "FloatValue",
            np.float64: "DoubleValue",
        }
        for dtype, name in expected.items():
            self.assertEqual(edf_data_type_name(NumberType.from_numpy(dtype)), name)
            frame = Frame(np.zeros(3, dtype=dtype))
            entries, _, _ = split_header(compose_header(frame, SessionConfig()))
            self.assertIn(("DataType", name), entries)
        self.assertEqual(edf_data_type_name(None), "UnAssigned")
        entries, _, _ = split_header(compose_header(Frame(np.zeros(3, dtype=np.int64)), SessionConfig()))
        self.assertIn(("DataType", "UnAssigned"), entries)

    def test_body(self) -> None:
        body = format_header_body(
            NumberType.int16,
            [
                Attribute("A", AttributeKind.int32, 1),
                Attribute("Skipped", AttributeKind.undefined, object()),
                Attribute("A", AttributeKind.string, "again"),
            ],
            num_images=3,
        )
        self.assertEqual(
            body,
            b"ByteOrder = LowByteFirst ; \r\n"
            b"Num_Images = 3 ; \r\n"
            b"DataType = SignedShort ; \r\n"
            b"A = 1 ; \r\n"
            b"A = again ; \r\n",
        )

    def test_num_images(self) -> None:
        frame = Frame(np.zeros(4, dtype=np.uint8))
        single = SessionConfig(multi_frame=False, num_capture=12)
        multi = SessionConfig(multi_frame=True, num_capture=12)
        self.assertIn(("Num_Images", "1"), split_header(compose_header(frame, single))[0])
        self.assertIn(("Num_Images", "12"), split_header(compose_header(frame, multi))[0])
        self.assertIn(("Num_Images", "5"), split_header(compose_header(frame, multi, num_images=5))[0])

    def test_exposure_scenario(self) -> None:
        frame = Frame(
            np.arange(4, dtype=np.uint16).reshape(2, 2),
            [Attribute("Exposure", AttributeKind.float32, 0.5)],
        )
        header = compose_header(frame, SessionConfig())
        self.assertEqual(
            header,
            b"\n{EDF_DataBlockID = 1.Image.Psd ; \r\n"
            b"EDF_HeaderSize = 159 ; \r\n"
            b"ByteOrder = LowByteFirst ; \r\n"
            b"Num_Images = 1 ; \r\n"
            b"DataType = UnsignedShort ; \r\n"
            b"Exposure = 0.5 ; \r\n"
            b"}\n",
        )
        self.assertEqual(len(header), 159)

    def test_many_attributes(self) -> None:
        attributes = [Attribute(f"K{i}", AttributeKind.string, "v" * (i % 300)) for i in range(120)]
        frame = Frame(np.zeros(2, dtype=np.float32), attributes)
        header = compose_header(frame, SessionConfig())
        entries, raw, block = split_header(header)
        self.assertEqual(block, b"")
        self.assertEqual(int(dict(entries)["EDF_HeaderSize"]), len(raw))
        self.assertEqual([k for k, _ in entries[5:]], [f"K{i}" for i in range(120)])


if __name__ == "__main__":
    unittest.main()
