"""Allow running as ``python -m planpatch``."""

import sys

from planpatch.cli.main import main

sys.exit(main())
