"""
Military Essentials static site server.

Usage:
    python -m mes_backend [--host HOST] [--port PORT] [--static-root PATH] [--env NAME]

Then open http://localhost:3000 in your browser.
"""
import argparse
import sys

from .app import run
from .config import load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the Military Essentials website")
    parser.add_argument("--host", help="Interface to bind (default: MES_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: MES_PORT/PORT or 3000)")
    parser.add_argument("--static-root", help="Directory holding index.html and assets")
    parser.add_argument("--env", dest="environment", help="Environment name (default: MES_ENV/NODE_ENV)")
    parser.add_argument(
        "--shutdown-timeout",
        dest="shutdown_timeout_s",
        type=float,
        help="Seconds to wait for open connections on shutdown",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(
        host=args.host,
        port=args.port,
        static_root=args.static_root,
        environment=args.environment,
        shutdown_timeout_s=args.shutdown_timeout_s,
    )
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
