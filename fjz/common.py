# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

# Based on the .ZIP File Format Specification (APPNOTE.TXT), version 6.3.6:
#   https://pkware.cachefly.net/webdocs/casestudies/APPNOTE.TXT

import codecs
import enum
import struct

# Windows-31J, i.e. the Microsoft flavour of Shift JIS that Japanese Windows
# uses for filenames in zip files.
LEGACY_ENCODING = "cp932"
PORTABLE_ENCODING = "utf-8"

# General purpose bit 11: "Language encoding flag (EFS)". If set, filename
# and comment are UTF-8.
UTF8_FLAG = 0x0800

# Payloads can be arbitrarily large, so we never hold more than this many
# bytes of one in memory at a time.
COPY_CHUNK_SIZE = 2 ** 20

SIGNATURE_LENGTH = 4

class RecordKind(enum.Enum):
    """The zip record types we know about, keyed by their 4-byte on-disk
    signature.

    """
    LOCAL_FILE_HEADER = b"PK\x03\x04"
    DIRECTORY_ENTRY = b"PK\x01\x02"
    END_OF_DIRECTORY = b"PK\x05\x06"
    ARCHIVE_EXTRA_DATA = b"PK\x06\x08"
    DIGITAL_SIGNATURE = b"PK\x05\x05"
    ZIP64_END_OF_DIRECTORY = b"PK\x06\x06"
    ZIP64_END_OF_DIRECTORY_LOCATOR = b"PK\x06\x07"
    SPANNING_SIGNATURE = b"PK\x07\x08"
    SPANNING_MARKER = b"PK\x30\x30"

# Records we recognize but refuse to handle, with the name of the feature
# they belong to.
unsupported_features = {
    RecordKind.ARCHIVE_EXTRA_DATA: "Archive extra data record",
    RecordKind.DIGITAL_SIGNATURE: "Digital signature",
    RecordKind.ZIP64_END_OF_DIRECTORY:
        "Zip64 end of central directory record",
    RecordKind.ZIP64_END_OF_DIRECTORY_LOCATOR:
        "Zip64 end of central directory locator",
    RecordKind.SPANNING_SIGNATURE: "Special spanning signature",
    RecordKind.SPANNING_MARKER: "Special spanning marker",
}

class FJZError(Exception):
    """Exception class used for most errors encountered in the FJZ
    package. (Though we do sometimes raise exceptions of the standard Python
    types like :class:`IOError`, :class:`ValueError`, etc.)

    """
    pass

class FJZCorrupt(FJZError):
    """A subclass of :class:`FJZError`, used specifically for errors that
    indicate a malformed or corrupted zip file.

    """
    pass

class FJZTruncated(FJZCorrupt):
    """The archive ended in the middle of a record."""
    pass

class FJZUnknownSignature(FJZCorrupt):
    """A record started with 4 bytes that are not any known zip signature.

    ``offset`` is the position of those bytes in the *input* file.

    """
    def __init__(self, signature, offset):
        FJZCorrupt.__init__(self, "Unknown record %r at offset 0x%08X"
                            % (signature, offset))
        self.signature = signature
        self.offset = offset

class FJZLedgerMiss(FJZCorrupt):
    """A central directory entry names a file that no local file header
    before it had.

    """
    def __init__(self, filename):
        FJZCorrupt.__init__(self, "central directory entry for %r has no "
                            "preceding local file header" % (filename,))
        self.filename = filename

class FJZDecodeError(FJZError):
    """A filename could not be converted between encodings."""
    def __init__(self, msg, raw, offset=None):
        if offset is not None:
            msg = "%s (record at offset 0x%08X)" % (msg, offset)
        FJZError.__init__(self, msg)
        self.raw = raw
        self.offset = offset

class FJZUnsupportedRecord(FJZError):
    """The archive uses a zip feature that we do not implement."""
    def __init__(self, kind, offset):
        self.kind = kind
        self.feature = unsupported_features[kind]
        FJZError.__init__(self, "%s at offset 0x%08X is not supported"
                          % (self.feature, offset))
        self.offset = offset

class FJZOverflow(FJZError):
    """A rewritten value does not fit in its (non-zip64) field."""
    pass

def decode_signature(signature, offset):
    try:
        return RecordKind(signature)
    except ValueError:
        raise FJZUnknownSignature(signature, offset)

def check_encoding(encoding):
    """Return the canonical name of text encoding 'encoding', or raise
    ValueError.

    Codecs like "hex" or "rot13" are known to :mod:`codecs` but do not
    convert between bytes and str, so they are rejected too.

    """
    try:
        name = codecs.lookup(encoding).name
        # non-text codecs raise LookupError here
        u"".encode(name).decode(name)
    except (LookupError, UnicodeError):
        raise ValueError("unknown text encoding %r" % (encoding,))
    return name

def transcode_filename(raw, from_encoding=LEGACY_ENCODING,
                       to_encoding=PORTABLE_ENCODING, offset=None):
    """Convert a raw filename from one encoding to another, strictly.

    Returns ``(name, encoded)``: the decoded filename as text, and its bytes
    in `to_encoding`. Raises :class:`FJZDecodeError` if the bytes are not
    valid `from_encoding`, or the text cannot be represented in
    `to_encoding`.

    """
    try:
        name = raw.decode(from_encoding)
    except UnicodeDecodeError as e:
        raise FJZDecodeError("filename %r is not valid %s: %s"
                             % (raw, from_encoding, e), raw, offset)
    try:
        encoded = name.encode(to_encoding)
    except UnicodeEncodeError as e:
        raise FJZDecodeError("filename %r cannot be encoded as %s: %s"
                             % (name, to_encoding, e), raw, offset)
    return name, encoded

def read_n(f, n):
    data = f.read(n)
    if len(data) < n:
        raise FJZTruncated("unexpectedly encountered end of file")
    return data

def read_format(f, struct_format):
    length = struct.calcsize(struct_format)
    data = read_n(f, length)
    return struct.unpack(struct_format, data)

def write_format(f, struct_format, *values):
    try:
        f.write(struct.pack(struct_format, *values))
    except struct.error as e:
        raise FJZOverflow("value does not fit in zip field: %s" % (e,))

def copy_n(in_f, out_f, n):
    while n > 0:
        chunk = read_n(in_f, min(n, COPY_CHUNK_SIZE))
        out_f.write(chunk)
        n -= len(chunk)

# Stands in for an output file when we only want to know what a conversion
# would do (e.g. 'fjz validate').
class CountingSink(object):
    def __init__(self):
        self._position = 0

    def write(self, data):
        self._position += len(data)
        return len(data)

    def tell(self):
        return self._position

    def flush(self):
        pass
