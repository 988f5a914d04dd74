"""Run the gitlet CLI: python -m gitlet <cmd> ..."""

import sys

from .cli import main

sys.exit(main())
