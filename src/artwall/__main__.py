"""
__main__.py

This file adds support for running artwall as a python module (python -m artwall) instead of
invoking the "artwall" command line entrypoint.
"""

from artwall.cli import main

if __name__ == "__main__":
    main()
