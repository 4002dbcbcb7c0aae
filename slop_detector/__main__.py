"""Allow ``python -m slop_detector``."""

import sys

from .cli import main

sys.exit(main())
