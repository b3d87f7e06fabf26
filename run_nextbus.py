#!/usr/bin/env python3
"""
Convenience entry point for running nextbus directly.

Usage: python run_nextbus.py [command] [options]
"""

from nextbus.cli.app import app

if __name__ == "__main__":
    app()
