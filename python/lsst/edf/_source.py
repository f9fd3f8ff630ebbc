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

__all__ = ("FrameSource", "IterableFrameSource", "write_frames")

from collections.abc import Iterable
from logging import getLogger
from typing import Protocol

import numpy as np

from lsst.resources import ResourcePathExpression

from ._config import SessionConfig
from ._frame import Frame
from ._session import FileOpenMode, FrameFileSession

_LOG = getLogger(__name__)


class FrameSource(Protocol):
    """Interface for anything that produces frames to be written."""

    def next_frame(self) -> Frame:
        """Return the next frame.

        Implementations may block until a frame is available, and should
        raise `StopIteration` when there are no more.
        """
        ...


class IterableFrameSource:
    """A `FrameSource` backed by an iterable.

    Parameters
    ----------
    frames
        Frames to return, in order.  Bare arrays are wrapped in `Frame`
        instances with no attributes.
    """

    def __init__(self, frames: Iterable[Frame | np.ndarray]):
        self._iter = iter(frames)

    def next_frame(self) -> Frame:
        item = next(self._iter)
        if isinstance(item, Frame):
            return item
        return Frame(item)


def write_frames(
    path: ResourcePathExpression, source: FrameSource, config: SessionConfig | None = None
) -> int:
    """Write frames from a source to a new EDF file.

    Parameters
    ----------
    path
        File to create or truncate.
    source
        Source of frames.  The first frame determines the header.
    config, optional
        Session options.  In multi-frame mode ``config.num_capture`` frames
        are written (at least one); otherwise exactly one.

    Returns
    -------
    n_frames
        Number of frames written.  This is smaller than the number declared
        in the header if the source ran out early.

    Raises
    ------
    ValueError
        Raised if the source has no frames at all.  No file is created.
    """
    if config is None:
        config = SessionConfig()
    n_frames = max(config.num_images, 1)
    try:
        first = source.next_frame()
    except StopIteration:
        raise ValueError("Frame source is empty.") from None
    with FrameFileSession(config) as session:
        session.open(path, FileOpenMode.WRITE, first)
        session.write_frame(first)
        for _ in range(n_frames - 1):
            try:
                frame = source.next_frame()
            except StopIteration:
                _LOG.warning("Frame source exhausted after %d frame(s).", session.frames_written)
                break
            session.write_frame(frame)
        return session.frames_written
