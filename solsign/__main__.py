"""Allow ``python -m solsign``."""

import sys

from .cli import main

sys.exit(main())
