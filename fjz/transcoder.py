# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

# The whole conversion is a single pass over the input. Records are read,
# rewritten and written out one at a time, in file order. The only thing
# that looks "backwards" is the central directory: each directory entry has
# to point at the *output* offset of its local file header, which we only
# know because we wrote that header earlier in the same pass. So this is
# really two logical passes (local headers, then directory entries) that
# happen to line up with physical file order -- which the zip layout
# guarantees, and which we rely on. An archive whose central directory
# comes before its local headers gets an FJZLedgerMiss.

import os
from collections import namedtuple

from .common import (FJZLedgerMiss,
                     FJZUnsupportedRecord,
                     RecordKind,
                     LEGACY_ENCODING,
                     PORTABLE_ENCODING,
                     UTF8_FLAG,
                     SIGNATURE_LENGTH,
                     unsupported_features,
                     check_encoding,
                     decode_signature,
                     transcode_filename,
                     read_n,
                     copy_n)
from .records import read_record, write_record

# What the 'report' callback receives after each record has been written.
# 'filename' is the decoded name, or None for the end of directory record.
Transcoded = namedtuple("Transcoded",
                        ["kind", "input_offset", "output_offset", "filename"])

class OffsetLedger(object):
    """Where each local file header ended up in the output.

    ``offsets`` maps decoded filename -> output offset of that file's local
    header. ``directory_offset`` is the output offset of the first central
    directory entry, or None until we have seen one.

    """
    def __init__(self):
        self.offsets = {}
        self.directory_offset = None
        # Names that had more than one local header. The later header wins,
        # so every directory entry with that name points at it.
        self.duplicates = set()

    def add_local_header(self, filename, output_offset):
        if filename in self.offsets:
            self.duplicates.add(filename)
        self.offsets[filename] = output_offset

    def local_header_offset(self, filename):
        try:
            return self.offsets[filename]
        except KeyError:
            raise FJZLedgerMiss(filename)

    def start_directory(self, output_offset):
        if self.directory_offset is None:
            self.directory_offset = output_offset

class TranscodeContext(object):
    """All the mutable state of one conversion run."""
    def __init__(self, in_f, out_f,
                 from_encoding=LEGACY_ENCODING,
                 to_encoding=PORTABLE_ENCODING,
                 set_utf8_flag=False,
                 report=None):
        self.in_f = in_f
        self.out_f = out_f
        self.from_encoding = check_encoding(from_encoding)
        self.to_encoding = check_encoding(to_encoding)
        self.set_utf8_flag = set_utf8_flag
        self.report = report
        self.ledger = OffsetLedger()
        self.records = 0
        # Names whose local header already claimed to be UTF-8. They are
        # converted like any other name all the same.
        self.utf8_flagged = set()

    def transcode_filename(self, raw, input_offset):
        return transcode_filename(raw, self.from_encoding, self.to_encoding,
                                  offset=input_offset)

    def rewrite_flags(self, flags):
        if self.set_utf8_flag:
            return flags | UTF8_FLAG
        return flags

    def done(self, kind, input_offset, output_offset, filename):
        self.records += 1
        if self.report is not None:
            self.report(Transcoded(kind, input_offset, output_offset,
                                   filename))

def _transcode_local_file_header(ctx, input_offset, output_offset):
    fields, data = read_record(ctx.in_f, RecordKind.LOCAL_FILE_HEADER)
    name, data["filename"] = ctx.transcode_filename(data["filename"],
                                                    input_offset)
    if fields["flags"] & UTF8_FLAG:
        ctx.utf8_flagged.add(name)
    fields["filename_length"] = len(data["filename"])
    fields["flags"] = ctx.rewrite_flags(fields["flags"])
    write_record(ctx.out_f, RecordKind.LOCAL_FILE_HEADER, fields, data)
    copy_n(ctx.in_f, ctx.out_f, fields["compressed_size"])
    ctx.ledger.add_local_header(name, output_offset)
    return name

def _transcode_directory_entry(ctx, input_offset, output_offset):
    ctx.ledger.start_directory(output_offset)
    fields, data = read_record(ctx.in_f, RecordKind.DIRECTORY_ENTRY)
    # XX comments are copied as-is; it's not clear whether tools expect them
    # to be converted along with the filename.
    name, data["filename"] = ctx.transcode_filename(data["filename"],
                                                    input_offset)
    fields["filename_length"] = len(data["filename"])
    fields["flags"] = ctx.rewrite_flags(fields["flags"])
    fields["local_header_offset"] = ctx.ledger.local_header_offset(name)
    write_record(ctx.out_f, RecordKind.DIRECTORY_ENTRY, fields, data)
    return name

def _transcode_end_of_directory(ctx, input_offset, output_offset):
    fields, data = read_record(ctx.in_f, RecordKind.END_OF_DIRECTORY)
    # An archive with no entries at all has an empty directory right here.
    ctx.ledger.start_directory(output_offset)
    directory_offset = ctx.ledger.directory_offset
    # The size covers the directory entries only, not this record.
    fields["directory_size"] = output_offset - directory_offset
    fields["directory_offset"] = directory_offset
    write_record(ctx.out_f, RecordKind.END_OF_DIRECTORY, fields, data)
    return None

_transcoders = {
    RecordKind.LOCAL_FILE_HEADER: _transcode_local_file_header,
    RecordKind.DIRECTORY_ENTRY: _transcode_directory_entry,
    RecordKind.END_OF_DIRECTORY: _transcode_end_of_directory,
}

def _stream_length(f):
    here = f.tell()
    f.seek(0, os.SEEK_END)
    length = f.tell()
    f.seek(here)
    return length

def transcode(in_f, out_f, **kwargs):
    """Rewrite the zip archive in 'in_f' into 'out_f', converting every
    filename from one encoding to another.

    :arg in_f: A binary file object, seekable, positioned at the start of
       the archive.
    :arg out_f: A binary file object to write the new archive to. Must
       support ``tell()``; offsets in the new archive are taken from it.
    :arg from_encoding: The encoding filenames are stored in. Defaults to
       ``"cp932"`` (Windows-31J, the Japanese Shift JIS variant).
    :arg to_encoding: The encoding to store filenames in. Defaults to
       ``"utf-8"``.
    :arg set_utf8_flag: If true, set general purpose bit 11 ("language
       encoding flag") on every rewritten entry, so that readers know the
       names are UTF-8. Defaults to False, which leaves all flags alone.
    :arg report: Optional callable, called with a :class:`Transcoded`
       after each record is written.

    Compressed data, checksums and comments are copied byte for byte.

    On any error, an exception derived from :class:`FJZError` is raised and
    'out_f' is left partially written.

    Returns the :class:`TranscodeContext` of the finished run.

    """
    ctx = TranscodeContext(in_f, out_f, **kwargs)
    input_length = _stream_length(in_f)
    while in_f.tell() < input_length:
        input_offset = in_f.tell()
        output_offset = out_f.tell()
        signature = read_n(in_f, SIGNATURE_LENGTH)
        kind = decode_signature(signature, input_offset)
        if kind in unsupported_features:
            raise FJZUnsupportedRecord(kind, input_offset)
        name = _transcoders[kind](ctx, input_offset, output_offset)
        ctx.done(kind, input_offset, output_offset, name)
    return ctx

def transcode_path(input_path, output_path, overwrite=False, **kwargs):
    """Like :func:`transcode`, but takes filenames.

    The output file must not already exist, unless 'overwrite' is true.

    """
    mode = "wb" if overwrite else "xb"
    with open(input_path, "rb") as in_f:
        with open(output_path, mode) as out_f:
            return transcode(in_f, out_f, **kwargs)
