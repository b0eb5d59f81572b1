"""Package entry point for ``python -m marker_timeline``.

HOW: Delegates to the CLI's main() function.
"""

from marker_timeline.cli import main

if __name__ == "__main__":
    main()
