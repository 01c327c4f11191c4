# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

# Layouts of the zip records we rewrite. Each layout lists the fixed-length
# fields in on-disk order, followed by the length fields of the
# variable-length blocks that come after them. Sections 4.3.7, 4.3.12 and
# 4.3.16 of APPNOTE.TXT.

from collections import OrderedDict

from .common import RecordKind, read_n, read_format, write_format

local_file_header_format = [
    ("version_needed", "H"),
    ("flags", "H"),
    ("compression_method", "H"),
    ("last_mod_time", "H"),
    ("last_mod_date", "H"),
    ("crc32", "I"),
    ("compressed_size", "I"),
    ("uncompressed_size", "I"),
    ("filename_length", "H"),
    ("extra_length", "H"),
    ]
local_file_header_blocks = [
    ("filename", "filename_length"),
    ("extra", "extra_length"),
    ]

directory_entry_format = [
    ("version_made_by", "H"),
    ("version_needed", "H"),
    ("flags", "H"),
    ("compression_method", "H"),
    ("last_mod_time", "H"),
    ("last_mod_date", "H"),
    ("crc32", "I"),
    ("compressed_size", "I"),
    ("uncompressed_size", "I"),
    ("filename_length", "H"),
    ("extra_length", "H"),
    ("comment_length", "H"),
    ("disk_number_start", "H"),
    ("internal_attributes", "H"),
    ("external_attributes", "I"),
    # Rewritten from the ledger; the input value is never used.
    ("local_header_offset", "I"),
    ]
directory_entry_blocks = [
    ("filename", "filename_length"),
    ("extra", "extra_length"),
    ("comment", "comment_length"),
    ]

end_of_directory_format = [
    ("disk_number", "H"),
    ("directory_disk", "H"),
    ("entries_this_disk", "H"),
    ("entries_total", "H"),
    # These two are recomputed from output offsets.
    ("directory_size", "I"),
    ("directory_offset", "I"),
    ("comment_length", "H"),
    ]
end_of_directory_blocks = [
    ("comment", "comment_length"),
    ]

layouts = {
    RecordKind.LOCAL_FILE_HEADER:
        (local_file_header_format, local_file_header_blocks),
    RecordKind.DIRECTORY_ENTRY:
        (directory_entry_format, directory_entry_blocks),
    RecordKind.END_OF_DIRECTORY:
        (end_of_directory_format, end_of_directory_blocks),
}

def _struct_format(field_format):
    return "<" + "".join(code for (_, code) in field_format)

def read_record(f, kind):
    """Read the body of a 'kind' record from 'f', which must be positioned
    just after the 4-byte signature.

    Returns ``(fields, data)``: an OrderedDict of the fixed-length fields,
    and a dict mapping each variable-length block's name to its raw bytes.
    For local file headers, the compressed data that follows is *not* read.

    """
    field_format, blocks = layouts[kind]
    values = read_format(f, _struct_format(field_format))
    fields = OrderedDict(zip([name for (name, _) in field_format], values))
    data = {}
    for (block, length_field) in blocks:
        data[block] = read_n(f, fields[length_field])
    return fields, data

def write_record(f, kind, fields, data):
    """Write a complete 'kind' record, signature included.

    The length fields are written as given in 'fields'; callers who change a
    block must update its length field too.

    """
    field_format, blocks = layouts[kind]
    for (block, length_field) in blocks:
        assert fields[length_field] == len(data[block])
    f.write(kind.value)
    write_format(f, _struct_format(field_format),
                 *[fields[name] for (name, _) in field_format])
    for (block, _) in blocks:
        f.write(data[block])
