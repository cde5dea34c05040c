"""
Allow running the governance server as a Python module.

Usage:
    python -m fleet_governance

This is equivalent to running:
    python run_server.py
"""

from .server import main

if __name__ == "__main__":
    main()
