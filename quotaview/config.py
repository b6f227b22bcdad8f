"""Runtime settings for the live dashboard, read from the environment.

Only the shell reads these; renderers get everything as arguments.
"""

import os
from pathlib import Path

HOME = Path.home()
QUOTAVIEW_DIR = Path(os.environ.get('QUOTAVIEW_DIR', HOME / '.quotaview'))
SNAPSHOT_FILE = Path(os.environ.get('QUOTAVIEW_SNAPSHOTS', QUOTAVIEW_DIR / 'snapshots.json'))
DEFAULT_VIEW = os.environ.get('QUOTAVIEW_VIEW', 'grid')
LOG_LEVEL = os.environ.get('QUOTAVIEW_LOG_LEVEL', 'WARNING').upper()

# Refresh intervals (seconds)
try:
    REFRESH_INTERVAL = max(float(os.environ.get('QUOTAVIEW_REFRESH', '2')), 0.2)
except ValueError:
    REFRESH_INTERVAL = 2.0
RELOAD_INTERVAL = 10   # snapshot file re-read

# ASCII mode for Linux TTY (auto-detected)
_term = os.environ.get('TERM', '').lower()
ASCII_MODE = (_term == 'linux')
