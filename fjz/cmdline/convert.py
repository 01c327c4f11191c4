# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

import os.path
import sys

from fjz import FJZError, transcode_path
from .util import encoding_kwargs, optfail

def _print_record(record):
    sys.stdout.write("fjz: 0x%08X -> 0x%08X  %s"
                     % (record.input_offset, record.output_offset,
                        record.kind.name))
    if record.filename is not None:
        sys.stdout.write("  %s" % (record.filename,))
    sys.stdout.write("\n")

def command_convert(opts):
    """Rewrite a zip file so that its filenames are stored as UTF-8.

Usage:
  fjz convert [--from=ENCODING] [--to=ENCODING] [--set-utf8-flag]
              [-f] [-v] -i FILE -o FILE
  fjz convert --help

Options:
  -i FILE, --input=FILE   The zip file to read.
  -o FILE, --output=FILE  The zip file to create.
  --from=ENCODING         Encoding of the filenames in the input file.
                          [default: cp932]
  --to=ENCODING           Encoding to use for filenames in the output file.
                          [default: utf-8]
  --set-utf8-flag         Also set the "language encoding" flag (general
                          purpose bit 11) on every entry, telling unzip
                          tools that the names are UTF-8. Without this
                          option, flags are copied unchanged.
  -f, --force             Overwrite the output file if it already exists.
  -v, --verbose           Print a line for every record converted.

Compressed data is copied byte for byte; nothing is decompressed or
recompressed. File comments are copied unchanged. If conversion fails, the
partially written output file is left behind and must not be used.
"""
    input_path = opts["--input"]
    output_path = opts["--output"]
    if not os.path.exists(input_path):
        optfail("%s: no such file" % (input_path,))
    if os.path.exists(output_path):
        if not opts["--force"]:
            optfail("%s already exists (use --force to overwrite it)"
                    % (output_path,))
        if os.path.samefile(input_path, output_path):
            optfail("input and output are the same file")

    report = None
    if opts["--verbose"]:
        report = _print_record

    sys.stdout.write("fjz: Converting %s -> %s\n" % (input_path, output_path))
    sys.stdout.flush()
    try:
        ctx = transcode_path(input_path, output_path,
                             overwrite=opts["--force"],
                             set_utf8_flag=opts["--set-utf8-flag"],
                             report=report,
                             **encoding_kwargs(opts))
    except (FJZError, OSError) as e:
        sys.stdout.flush()
        sys.stderr.write("fjz: error: %s\n" % (e,))
        return 1

    for name in sorted(ctx.utf8_flagged):
        sys.stderr.write("fjz: warning: %r was already marked as UTF-8, but "
                         "was converted from %s anyway\n"
                         % (name, ctx.from_encoding))
    for name in sorted(ctx.ledger.duplicates):
        sys.stderr.write("fjz: warning: more than one local header for %r; "
                         "all directory entries point at the last one\n"
                         % (name,))
    sys.stdout.write("fjz: Done (%s records).\n" % (ctx.records,))
    return 0
