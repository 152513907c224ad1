"""
Convenience entry point for running bookingcalendar as a module.

Usage: python -m bookingcalendar [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
