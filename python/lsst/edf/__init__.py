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


"""Writers for EDF (ESRF Data Format) image files.

An EDF file is a plain-text header of ``key = value ;`` lines enclosed in
braces, followed by the raw pixels of one or more frames.  The header
declares its own size in bytes, and may be padded to a configured minimum.
"""

from ._attribute_text import *
from ._config import *
from ._dtypes import *
from ._errors import *
from ._frame import *
from ._header import *
from ._session import *
from ._source import *
