# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

import os
import os.path
import struct
import zlib
from collections import namedtuple
from contextlib import contextmanager
from io import BytesIO
from tempfile import mkstemp

from fjz.common import RecordKind, read_n
from fjz.records import read_record

# NEVER USE unlink_first=True WITHOUT O_EXCL
@contextmanager
def tempname(suffix="", unlink_first=False):
    try:
        fd, path = mkstemp(suffix=suffix)
        os.close(fd)
        if unlink_first:
            os.unlink(path)
        yield path
    finally:
        try:
            os.unlink(path)
        except OSError:
            # if it was already deleted, then that's okay
            pass

# 2020-01-01 12:00:00 in DOS format
DOS_TIME = 0x6000
DOS_DATE = 0x5021

def local_file_header(name, payload, flags=0, extra=b""):
    crc = zlib.crc32(payload) & 0xffffffff
    return (RecordKind.LOCAL_FILE_HEADER.value
            + struct.pack("<HHHHHIIIHH",
                          20, flags, 0, DOS_TIME, DOS_DATE,
                          crc, len(payload), len(payload),
                          len(name), len(extra))
            + name + extra + payload)

def directory_entry(name, payload, offset, flags=0, extra=b"", comment=b""):
    crc = zlib.crc32(payload) & 0xffffffff
    return (RecordKind.DIRECTORY_ENTRY.value
            + struct.pack("<HHHHHHIIIHHHHHII",
                          0x031e, 20, flags, 0, DOS_TIME, DOS_DATE,
                          crc, len(payload), len(payload),
                          len(name), len(extra), len(comment),
                          0, 0, 0o100644 << 16, offset)
            + name + extra + comment)

def end_of_directory(entries, size, offset, comment=b""):
    return (RecordKind.END_OF_DIRECTORY.value
            + struct.pack("<HHHHIIH", 0, 0, entries, entries, size, offset,
                          len(comment))
            + comment)

def make_zip(entries, comment=b"", entry_comment=b"", directory_names=None,
             flags=0):
    """Build a stored (uncompressed) zip archive byte by byte.

    'entries' is a list of (name, payload) pairs, both bytes, so that names
    can be in any encoding. 'directory_names' optionally overrides the names
    used in the central directory.

    """
    pieces = []
    offsets = []
    position = 0
    for (name, payload) in entries:
        offsets.append(position)
        pieces.append(local_file_header(name, payload, flags=flags))
        position += len(pieces[-1])
    directory_offset = position
    if directory_names is None:
        directory_names = [name for (name, _) in entries]
    for (name, (_, payload), offset) in zip(directory_names, entries,
                                             offsets):
        pieces.append(directory_entry(name, payload, offset, flags=flags,
                                      comment=entry_comment))
        position += len(pieces[-1])
    pieces.append(end_of_directory(len(entries), position - directory_offset,
                                   directory_offset, comment))
    return b"".join(pieces)

ParsedRecord = namedtuple("ParsedRecord",
                          ["kind", "offset", "fields", "data", "payload"])

def parse_zip(archive):
    f = BytesIO(archive)
    records = []
    while f.tell() < len(archive):
        offset = f.tell()
        kind = RecordKind(read_n(f, 4))
        fields, data = read_record(f, kind)
        payload = None
        if kind is RecordKind.LOCAL_FILE_HEADER:
            payload = read_n(f, fields["compressed_size"])
        records.append(ParsedRecord(kind, offset, fields, data, payload))
    return records

def records_of(records, kind):
    return [record for record in records if record.kind is kind]
