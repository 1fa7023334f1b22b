"""
Entry point for Remediator.

This module provides the main entry point that delegates to the package's CLI.
"""

from src.remediator.main import cli

if __name__ == "__main__":
    cli()
