#!/usr/bin/env python3
"""Thin wrapper: run gitlet CLI. Usage: python main.py <cmd> ... (same as python -m gitlet)."""

import sys

if __name__ == "__main__":
    from gitlet.cli import main
    sys.exit(main())
