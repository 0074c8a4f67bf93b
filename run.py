#!/usr/bin/env python3
"""Run Menu Planner API."""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from menu_planner.main import run

if __name__ == "__main__":
    run()
