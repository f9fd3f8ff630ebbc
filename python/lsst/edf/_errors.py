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
    "FrameFileError",
    "InvalidCaptureCountError",
    "NotOpenError",
    "StreamCreateError",
    "UnsupportedModeError",
    "UnsupportedOperationError",
)


class FrameFileError(RuntimeError):
    """Base class for errors raised by `FrameFileSession`."""


class UnsupportedModeError(FrameFileError):
    """Exception raised when a file is opened for reading or appending."""


class InvalidCaptureCountError(FrameFileError):
    """Exception raised when the configured number of frames to capture is
    negative.
    """


class StreamCreateError(FrameFileError):
    """Exception raised when the output file cannot be created."""


class NotOpenError(FrameFileError):
    """Exception raised when a frame is written to a session with no open
    file.
    """


class UnsupportedOperationError(FrameFileError):
    """Exception raised for operations the EDF writer does not implement,
    such as reading frames back.
    """
