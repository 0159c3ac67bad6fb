#!/usr/bin/env python3
"""
Lap Telemetry Viewer - Main Entry Point

Synchronized channel traces and GPS track map for a single recorded lap.

Usage:
    python main.py                          # Browse sessions from the API
    python main.py --api http://host:8000   # Use another telemetry backend
    python main.py --file lap.json          # Open a saved lap directly
    python main.py --resolution 2000        # Start with 2000 points per view
"""
import argparse
import logging
import sys

import config

# Configure logging FIRST - before any other imports
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format='[%(levelname)s] %(name)s: %(message)s',
    stream=sys.stdout
)

from PyQt5 import QtWidgets

from telemetry.api_client import TelemetryApiClient, TelemetryFetchError, load_lap_file
from ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Lap telemetry viewer")
    parser.add_argument("--api", default=config.TELEMETRY_API_URL,
                        help="Telemetry backend base URL")
    parser.add_argument("--file", default=None,
                        help="Open a lap saved as JSON records instead of browsing the API")
    parser.add_argument("--resolution", type=int, default=config.DEFAULT_RESOLUTION,
                        help="Initial maximum number of points per view")
    return parser.parse_args(argv)


def main(argv=None):
    """
    Entry point for the lap viewer.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
    """
    args = parse_args(argv)

    print("=" * 60)
    print("🏁 LAP TELEMETRY VIEWER STARTING...")
    print("=" * 60)

    app = QtWidgets.QApplication(sys.argv)

    client = None if args.file else TelemetryApiClient(args.api, timeout=config.TELEMETRY_API_TIMEOUT)
    window = MainWindow(client=client, resolution=max(config.MIN_RESOLUTION, args.resolution))

    if args.file:
        try:
            window.show_lap(load_lap_file(args.file))
        except TelemetryFetchError as e:
            logger.error(f"{e}")
            window.statusBar().showMessage(str(e))
    else:
        logger.info(f"Using telemetry backend at {args.api}")
        window.load_sessions()

    window.show()
    print("✅ VIEWER READY")

    result = app.exec_()
    print("👋 Goodbye!")
    return result


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception as e:
        print("\n" + "=" * 60)
        print("❌ FATAL ERROR:")
        print("=" * 60)
        print(f"Error type: {type(e).__name__}")
        print(f"Error message: {e}")
        import traceback
        print("\nFull traceback:")
        traceback.print_exc()
        print("=" * 60)
        sys.exit(1)
