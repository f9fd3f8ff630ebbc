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

__all__ = ("SessionConfig",)

import pydantic


class SessionConfig(pydantic.BaseModel, frozen=True, extra="forbid"):
    """Options that control how a `FrameFileSession` writes its header."""

    minimum_header_size: pydantic.NonNegativeInt = 0
    """Smallest total header size in bytes; shorter headers are padded with
    spaces before the closing brace.  Zero disables padding.
    """

    multi_frame: bool = False
    """Whether the file will receive more than one frame.

    When `False` the header always declares a single image.
    """

    num_capture: int = 1
    """Number of frames declared in the header of a multi-frame file.

    This is not range-checked here; `FrameFileSession.open` rejects negative
    values.
    """

    @property
    def num_images(self) -> int:
        """Value of the ``Num_Images`` header key."""
        return self.num_capture if self.multi_frame else 1
