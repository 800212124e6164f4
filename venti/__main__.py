"""Allow ``python -m venti``."""

import sys

from .cli import main

sys.exit(main())
