#!/usr/bin/env python3
"""
neuroflap: Demo Launcher

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

Serves the live API so a flock can be created, ticked and watched.

Usage:
    python demo.py              # Start on port 8000
    python demo.py --port 3000  # Custom port
"""

import sys
import os
import argparse
import importlib.util

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

REQUIRED = ('numpy', 'fastapi', 'pydantic', 'uvicorn')

ROUTES = [
    ("POST /sim/create", "New run (mode smart|manual, population, seed)"),
    ("POST /sim/tick", "Advance N ticks"),
    ("POST /sim/auto", "Toggle auto-run"),
    ("POST /sim/speed", "1x, 2x, 5x or Max (25x)"),
    ("POST /sim/jump", "Flap (manual mode)"),
    ("GET  /sim/history", "Per-generation fitness and score"),
]


def main():
    parser = argparse.ArgumentParser(description='neuroflap demo server')
    parser.add_argument('--port', type=int, default=8000)
    parser.add_argument('--host', type=str, default='0.0.0.0')
    args = parser.parse_args()

    missing = [name for name in REQUIRED if importlib.util.find_spec(name) is None]
    if missing:
        print(f"  Missing dependencies: {', '.join(missing)}")
        print("  Install with: pip install -e .")
        sys.exit(1)

    print("\n  neuroflap: tiny networks learn to fly through pipes.\n")
    print(f"  API docs:  http://localhost:{args.port}/docs")
    print(f"  WebSocket: ws://localhost:{args.port}/ws\n")
    for route, what in ROUTES:
        print(f"    {route:<18} {what}")
    print("\n  Press Ctrl+C to stop.\n")

    import uvicorn
    from neuroflap.server import app

    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n  Flock grounded.\n")
