# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

import sys
import json
from collections import OrderedDict

from fjz import FJZError
from fjz.common import CountingSink
from fjz.transcoder import transcode
from .util import encoding_kwargs, open_zip

def command_info(opts):
    """Describe the records in a zip file, and where each would end up after
conversion.

Usage:
  fjz info [--from=ENCODING] [--to=ENCODING] [--] <zip_file>
  fjz info --help

Arguments:
  <zip_file>  Path to a zip file.

Options:
  --from=ENCODING  Encoding of the filenames in the zip file.
                   [default: cp932]
  --to=ENCODING    Encoding the filenames would be converted to.
                   [default: utf-8]

Nothing is written to disk. Output will be valid JSON.
"""
    records = []
    def collect(record):
        entry = OrderedDict()
        entry["kind"] = record.kind.name
        entry["input_offset"] = record.input_offset
        entry["output_offset"] = record.output_offset
        entry["filename"] = record.filename
        records.append(entry)

    sink = CountingSink()
    with open_zip(opts["<zip_file>"]) as in_f:
        try:
            ctx = transcode(in_f, sink, report=collect,
                            **encoding_kwargs(opts))
        except FJZError as e:
            sys.stderr.write("fjz: error: %s\n" % (e,))
            return 1
        input_length = in_f.tell()

    info = OrderedDict()
    info["from_encoding"] = ctx.from_encoding
    info["to_encoding"] = ctx.to_encoding
    info["input_length"] = input_length
    info["output_length"] = sink.tell()
    info["directory_offset"] = ctx.ledger.directory_offset
    info["duplicate_filenames"] = sorted(ctx.ledger.duplicates)
    info["records"] = records
    json.dump(info, sys.stdout, indent=4, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0
