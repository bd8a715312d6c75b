"""Allow ``python -m ccscan.cli``."""

from ccscan.cli import main

raise SystemExit(main())
