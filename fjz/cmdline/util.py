# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

import sys

def encoding_kwargs(opts):
    return {"from_encoding": opts["--from"],
            "to_encoding": opts["--to"]}

def optfail(msg):
    sys.stderr.write(msg)
    sys.stderr.write("\n")
    sys.exit(2)

def open_zip(path):
    try:
        return open(path, "rb")
    except IOError as e:
        optfail("%s: %s" % (path, e.strerror))
