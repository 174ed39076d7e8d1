"""Entry point for running readmegen as a module.

Usage:
    python -m readmegen [command] [options]

Example:
    python -m readmegen generate https://github.com/owner/repo
    python -m readmegen check
"""

from readmegen.cli import app

if __name__ == "__main__":
    app()
