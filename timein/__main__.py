"""Main entry point when executing timein as a package.

This allows running the package using python -m timein.
"""

from timein.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
