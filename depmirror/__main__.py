"""
Run the CLI as a module.

Usage:
    python -m depmirror sync
"""

from .main import cli

if __name__ == "__main__":
    cli()
