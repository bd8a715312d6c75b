"""Exit codes for the ccscan CLI.

- 0: Success (the Code Coverage CLI exited with 0)
- 1: Build step aborted (the Code Coverage CLI exited with a non-zero value)
- 2: Host connection or credentials could not be resolved
- 3: Invalid usage (bad arguments, unreadable config)
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_STEP_ABORTED = 1
EXIT_RESOLUTION_FAILURE = 2
EXIT_INVALID_USAGE = 3
