# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

# Quirky things about how the command system works here:
# - we use docopt: http://docopt.org
# - we store the --help text for each command as the docstring for the
#   relevant function.
# - the top-level 'main' does some prevalidation on arguments commonly used

import sys

from docopt import docopt, DocoptExit

import fjz
from fjz.common import check_encoding

from .util import optfail

# Docopt's exit conditions:
#   https://github.com/docopt/docopt/issues/106#issuecomment-20569331
#   https://github.com/docopt/docopt/issues/44
# Exiting with status 0 on --help is fine
# But we really should have status 2 if user provided invalid arguments.
def fixed_docopt(*args, **kwargs):
    try:
        return docopt(*args, **kwargs)
    except DocoptExit as e:
        sys.stderr.write(str(e))
        sys.stderr.write("\n")
        sys.exit(2)

subcommands = {}

from .convert import command_convert
subcommands["convert"] = command_convert

from .info import command_info
subcommands["info"] = command_info

from .validate import command_validate
subcommands["validate"] = command_validate

# args = argv[1:]
def main(args):
    """FJZ: convert the filenames in Japanese zip files to UTF-8, without
recompressing anything.

Usage:
  fjz <subcommand> [<args>...]
  fjz --version
  fjz --help

Available subcommands:
  fjz convert   Rewrite a zip file with UTF-8 filenames.
  fjz info      Show the records of a zip file and where they would move.
  fjz validate  Check that a zip file can be converted.

For details, use 'fjz <subcommand> --help'.
"""

    opts = fixed_docopt(main.__doc__, argv=args, version=fjz.__version__,
                        options_first=True)
    # docopt handles --help and --version for us
    subcommand = opts["<subcommand>"]
    if subcommand not in subcommands:
        optfail("Unrecognized subcommand %r; try --help for info"
                % (subcommand,))
    subcommand_fn = subcommands[subcommand]
    subopts = fixed_docopt(subcommand_fn.__doc__, argv=args)

    # Generic option handling

    # options naming text encodings
    for opt in ["--from", "--to"]:
        if subopts.get(opt) is not None:
            try:
                check_encoding(subopts[opt])
            except ValueError:
                optfail("%s wants a text encoding, but got %r"
                        % (opt, subopts[opt]))

    return subcommand_fn(subopts)

def entrypoint():
    return main(sys.argv[1:])

# The 'fix-japanese-zip' script: same as 'fjz convert'.
def convert_entrypoint():
    return main(["convert"] + sys.argv[1:])
