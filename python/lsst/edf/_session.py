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

__all__ = ("FileOpenMode", "FrameFileSession")

import enum
from logging import getLogger
from types import TracebackType
from typing import IO, Self

import fsspec

from lsst.resources import ResourcePath, ResourcePathExpression

from ._config import SessionConfig
from ._errors import (
    InvalidCaptureCountError,
    NotOpenError,
    StreamCreateError,
    UnsupportedModeError,
    UnsupportedOperationError,
)
from ._frame import Frame
from ._header import HeaderPlan

_LOG = getLogger(__name__)


class FileOpenMode(enum.Flag):
    """Modes a `FrameFileSession` may be asked to open a file in.

    Only `WRITE` is supported.
    """

    READ = enum.auto()
    WRITE = enum.auto()
    APPEND = enum.auto()


class FrameFileSession:
    """A writer for EDF files holding one or more frames.

    Parameters
    ----------
    config, optional
        Default options for files opened by this session.

    Notes
    -----
    A session is either closed or has exactly one open output stream.  The
    header is written when the file is opened, using the first frame's pixel
    type and attributes, and is never rewritten; each `write_frame` call then
    appends one frame's raw pixels.  Sessions may be reopened after they are
    closed, and may be used as context managers to guarantee that the stream
    is closed.

    Calls on a single session must not be made concurrently.
    """

    def __init__(self, config: SessionConfig | None = None):
        self._default_config = config if config is not None else SessionConfig()
        self._config = self._default_config
        self._stream: IO[bytes] | None = None
        self._path: ResourcePath | None = None
        self._header: HeaderPlan | None = None
        self._frames_written = 0

    @property
    def config(self) -> SessionConfig:
        """Options for the currently (or most recently) open file."""
        return self._config

    @property
    def is_open(self) -> bool:
        """Whether an output stream is open."""
        return self._stream is not None

    @property
    def path(self) -> ResourcePath | None:
        """Location of the currently (or most recently) open file."""
        return self._path

    @property
    def header(self) -> HeaderPlan | None:
        """Header written to the currently (or most recently) open file."""
        return self._header

    @property
    def frames_written(self) -> int:
        """Number of frames written since the file was opened."""
        return self._frames_written

    def open(
        self,
        path: ResourcePathExpression,
        mode: FileOpenMode,
        first_frame: Frame,
        config: SessionConfig | None = None,
    ) -> None:
        """Create a file and write its header.

        Parameters
        ----------
        path
            File to create or truncate; convertible to
            `lsst.resources.ResourcePath`.
        mode
            Requested mode; must not include `FileOpenMode.READ` or
            `FileOpenMode.APPEND`.
        first_frame
            Frame whose pixel type and attributes describe the file.  It is
            not written by this method; pass it to `write_frame` as well.
        config, optional
            Options for this file; defaults to the session's configuration.

        Raises
        ------
        UnsupportedModeError
            Raised if reading or appending was requested.  The file is not
            touched.
        InvalidCaptureCountError
            Raised if ``config.num_capture`` is negative.
        StreamCreateError
            Raised if the file could not be created.
        """
        if mode & FileOpenMode.READ:
            raise UnsupportedModeError("Reading EDF files is not supported.")
        if mode & FileOpenMode.APPEND:
            raise UnsupportedModeError("Appending to existing EDF files is not supported.")
        if config is None:
            config = self._default_config
        if config.num_capture < 0:
            raise InvalidCaptureCountError(
                f"Invalid number of frames to capture: {config.num_capture}. "
                "Please specify a number >= 0."
            )
        if self._stream is not None:
            self.close()
        # Build the header before the file is created or truncated.
        header = HeaderPlan.compose(first_frame, config)
        resource = ResourcePath(path)
        _LOG.debug("Opening %s for writing.", resource)
        fs: fsspec.AbstractFileSystem
        fs, fp = resource.to_fsspec()
        try:
            stream = fs.open(fp, "wb")
        except OSError as err:
            raise StreamCreateError(f"Failed to create output file {resource}.") from err
        try:
            stream.write(header.to_bytes())
        except BaseException:
            stream.close()
            raise
        self._stream = stream
        self._path = resource
        self._config = config
        self._header = header
        self._frames_written = 0
        _LOG.debug("Wrote %d-byte header to %s.", header.total_size, resource)

    def write_frame(self, frame: Frame) -> None:
        """Append one frame's pixels to the data block.

        Parameters
        ----------
        frame
            Frame to write.  Its raw little-endian bytes are written with no
            separator.

        Raises
        ------
        NotOpenError
            Raised if no file is open.
        """
        if self._stream is None:
            raise NotOpenError("No EDF file is open.")
        if self._frames_written >= self._config.num_images:
            _LOG.warning(
                "Writing frame %d to %s, which declares only %d image(s).",
                self._frames_written + 1,
                self._path,
                self._config.num_images,
            )
        self._stream.write(frame.buffer)
        self._frames_written += 1

    def read_frame(self) -> Frame:
        """Read a frame back from the file.

        Raises
        ------
        UnsupportedOperationError
            Always raised.
        """
        raise UnsupportedOperationError("Reading frames from EDF files is not supported.")

    def close(self) -> None:
        """Close the output stream.

        Closing a session with no open file does nothing.
        """
        if self._stream is None:
            _LOG.debug("File was not open; ignoring close.")
            return
        stream, self._stream = self._stream, None
        stream.close()
        if self._frames_written != self._config.num_images:
            # The header has already been written and is never patched.
            _LOG.warning(
                "Closed %s after writing %d frame(s), but its header declares %d.",
                self._path,
                self._frames_written,
                self._config.num_images,
            )
        else:
            _LOG.debug("Closed %s.", self._path)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_stream", None) is not None:
            self.close()
