# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

# This file is executed when 'python -m fjz' is run.

import sys

import fjz.cmdline.main

sys.exit(fjz.cmdline.main.entrypoint())
