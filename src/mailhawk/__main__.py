# =============================================================================
# mailhawk Entry Point for `python -m mailhawk`
# =============================================================================
# This module allows mailhawk to be run as a Python module:
#
#   python -m mailhawk --to bob@example.com --subject Hi --text hello
#
# This is equivalent to running the 'mailhawk' command after installation.
# =============================================================================

import sys

from mailhawk.app import main

if __name__ == "__main__":
    sys.exit(main())
