"""
Convenience entry point for running clinicschedule as a module.

Usage: python -m clinicschedule [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
