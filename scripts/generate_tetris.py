#!/usr/bin/env python3
"""Render the contribution calendar as falling tetrominoes.

Reads GITHUB_USERNAME and GITHUB_TOKEN from the environment, writes
output/tetris.svg (and a GIF preview with --gif). See --help.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from contrib_tetris.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
