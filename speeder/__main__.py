"""Package entry point for ``python -m speeder``.

WHY: Users run the terminal reader as ``python -m speeder notes.txt``.

HOW: Delegates to the CLI's main() function.
"""

import sys

if __name__ == "__main__":
    from speeder.cli import main
    sys.exit(main())
