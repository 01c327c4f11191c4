# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

import sys

from fjz import FJZError
from fjz.common import CountingSink
from fjz.transcoder import transcode
from .util import encoding_kwargs, open_zip

def command_validate(opts):
    """Check that a zip file can be converted, without writing anything.

Usage:
  fjz validate [--from=ENCODING] [--to=ENCODING] [--] <zip_file>
  fjz validate --help

Arguments:
  <zip_file>  Path to a zip file.

Options:
  --from=ENCODING  Encoding of the filenames in the zip file.
                   [default: cp932]
  --to=ENCODING    Encoding the filenames would be converted to.
                   [default: utf-8]
"""
    with open_zip(opts["<zip_file>"]) as in_f:
        try:
            transcode(in_f, CountingSink(), **encoding_kwargs(opts))
        except FJZError as e:
            sys.stdout.write(str(e))
            sys.stdout.write("\n")
            return 1
        else:
            sys.stdout.write("looks good!\n")
            return 0
