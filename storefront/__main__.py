"""Run the storefront with Flask's development server: python -m storefront"""

import argparse
from typing import List, Optional

from .config import FLASK_DEBUG, FLASK_HOST, FLASK_PORT


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="SOFI storefront development server")
    parser.add_argument("--host", default=FLASK_HOST, help=f"Bind address (default: {FLASK_HOST})")
    parser.add_argument("--port", type=int, default=FLASK_PORT, help=f"Port (default: {FLASK_PORT})")
    parser.add_argument("--debug", action="store_true", default=FLASK_DEBUG, help="Enable debug mode")
    args = parser.parse_args(argv)

    from .app import app

    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
