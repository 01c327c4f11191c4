# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

from .common import (FJZError, FJZCorrupt, FJZTruncated, FJZUnknownSignature,
                     FJZLedgerMiss, FJZDecodeError, FJZUnsupportedRecord,
                     FJZOverflow, RecordKind)
from .transcoder import transcode, transcode_path

from .version import __version__

__all__ = ["FJZError", "FJZCorrupt", "FJZTruncated", "FJZUnknownSignature",
           "FJZLedgerMiss", "FJZDecodeError", "FJZUnsupportedRecord",
           "FJZOverflow", "RecordKind", "transcode", "transcode_path"]
