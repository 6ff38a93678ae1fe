#!/usr/bin/env python3
"""
Launch script for the Fix Analytics backend.

Usage:
    python run_server.py [data_folder] [--port PORT] [--host HOST]

Examples:
    python run_server.py                    # Use default ./data/logs folder
    python run_server.py /path/to/csvs      # Use custom folder
    python run_server.py --port 5000        # Run on port 5000
    python run_server.py --generate-sample  # Write synthetic logs first
"""

import argparse
import os
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Fix Analytics Backend Server")
    parser.add_argument(
        "data_folder",
        nargs="?",
        default="./data/logs",
        help="Path to folder containing CSV fix logs (default: ./data/logs)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Run in debug mode"
    )
    parser.add_argument(
        "--generate-sample",
        action="store_true",
        help="Write synthetic fix logs into the data folder before starting"
    )

    args = parser.parse_args()

    data_folder = Path(args.data_folder)

    if args.generate_sample:
        from fixanalytics.utils.sample_data import generate_test_data_set

        files = generate_test_data_set(data_folder)
        print(f"Generated {len(files)} sample logs in {data_folder}")

    print("Fix Analytics Backend")
    print("=" * 40)
    print(f"Data folder: {data_folder.absolute()}")
    print(f"Server: http://{args.host}:{args.port}")
    print("=" * 40)

    if not data_folder.exists():
        print(f"\nWarning: Data folder does not exist: {data_folder}")
        print("You can set it later via POST /folder")

    # Configure data folder for FastAPI lifespan
    if data_folder.exists():
        os.environ["FIXANALYTICS_DATA_FOLDER"] = str(data_folder)

    print("\nAPI Endpoints:")
    print("  GET  /                       - Health check")
    print("  GET  /health                 - Detailed health")
    print("  POST /analyze                - Analyze raw records")
    print("  GET  /folder                 - Current folder info")
    print("  POST /folder                 - Set data folder")
    print("  POST /folder/rescan          - Rescan data folder")
    print("  GET  /logs                   - List all logs")
    print("  GET  /logs/{id}              - Get log summaries")
    print("  GET  /logs/{id}/samples      - Get enriched samples")
    print("  GET  /logs/{id}/samples.csv  - Export enriched samples")
    print("\nStarting server...")

    import uvicorn

    uvicorn.run(
        "fixanalytics.main:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()
