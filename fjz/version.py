# This file is part of FJZ
# Copyright (C) 2020 The FJZ developers
# See file LICENSE.txt for license information.

# This file must be kept very simple, because it is consumed from several
# places -- it is imported by fjz/__init__.py, execfile'd by setup.py, etc.

__version__ = "0.2.0"
