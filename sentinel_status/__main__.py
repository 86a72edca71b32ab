"""Run the status reporter from the command line."""

import sys

from .cli import main

sys.exit(main())
