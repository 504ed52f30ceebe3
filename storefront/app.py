"""Flask web app for the SOFI furniture storefront.

Renders the public catalog and the admin back-office. All data lives in the
store API; this app fetches it, renders templates and posts forms back.
"""

import logging
from typing import Tuple

from flask import Flask, render_template

from .carousel import resolve_image_url
from .config import (
    API_URL,
    FLASK_DEBUG,
    FLASK_HOST,
    FLASK_PORT,
    LOG_LEVEL,
    LOG_TO_FILE,
    REQUEST_TIMEOUT,
    SECRET_KEY,
)
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def format_price(value: float) -> str:
    """Format a price in rubles with space-separated thousands: 12 500 ₽."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return ""
    if amount.is_integer():
        text = f"{int(amount):,}"
    else:
        text = f"{amount:,.2f}"
    return text.replace(",", " ") + " ₽"


def create_app() -> Flask:
    """Build the Flask app with both blueprints registered."""
    setup_logging(level=getattr(logging, LOG_LEVEL, logging.INFO), log_to_file=LOG_TO_FILE)

    from .api_client import init_api_client
    from .views.admin import admin
    from .views.shop import shop

    init_api_client(API_URL, REQUEST_TIMEOUT)

    flask_app = Flask(__name__)
    flask_app.config["SECRET_KEY"] = SECRET_KEY
    # Database dumps can be large; images are checked separately
    flask_app.config["MAX_CONTENT_LENGTH"] = 200 * 1024 * 1024

    flask_app.register_blueprint(admin)
    flask_app.register_blueprint(shop)

    flask_app.add_template_filter(resolve_image_url, "image_url")
    flask_app.add_template_filter(format_price, "price")

    @flask_app.errorhandler(404)
    def not_found(_error: Exception) -> Tuple[str, int]:
        return render_template("not_found.html"), 404

    @flask_app.errorhandler(500)
    def server_error(error: Exception) -> Tuple[str, int]:
        logger.exception(f"Unhandled error: {error}")
        return render_template("server_error.html"), 500

    logger.info(f"Storefront configured against API {API_URL}")
    return flask_app


app = create_app()


if __name__ == "__main__":
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=FLASK_DEBUG)
