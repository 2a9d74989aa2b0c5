"""Interactive viewer for the sheet demo screen."""

from __future__ import annotations

import sys

from sheet_screenshot.ui.main import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
