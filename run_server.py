#!/usr/bin/env python
"""
Run the blog HTTP server: public API at the root, admin API under /admin.
"""
import logging
import os
import sys

import uvicorn

from admin_api import create_admin_app
from public_api import create_public_app
from src.article_store_factory import create_article_store
from src.config import Config
from src.event_sink_factory import create_event_sink
from src.publisher_factory import create_publisher
from src.token_verifier import SharedSecretTokenVerifier
from src.translator import OpenRouterTranslator


def configure_logging(level: int = logging.INFO) -> None:
    """Send application logs to the console."""
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)


def create_app(config: Config):
    """Build the combined application from configuration."""
    article_store = create_article_store(state_dir=config.state_dir)
    publisher = create_publisher(config, article_store=article_store)

    translator = None
    if config.openrouter_api_key:
        translator = OpenRouterTranslator(
            api_key=config.openrouter_api_key,
            model_name=config.model_name
        )

    admin_app = create_admin_app(
        article_store=article_store,
        publisher=publisher,
        token_verifier=SharedSecretTokenVerifier(config.admin_api_token),
        translator=translator,
    )
    app = create_public_app(article_store, create_event_sink(state_dir=config.state_dir))
    app.mount("/admin", admin_app)
    return app


def main():
    """Run the server."""
    configure_logging()
    config = Config()

    # Allow command-line argument to override environment variable
    port = config.server_port
    if len(sys.argv) > 1:
        try:
            port = int(sys.argv[1])
        except ValueError:
            print(f"Invalid port number: {sys.argv[1]}")
            sys.exit(1)

    app = create_app(config)

    print(f"Starting blog server on http://{config.server_host}:{port}")
    print(f"State directory: {os.path.abspath(config.state_dir)}")
    print("Press Ctrl+C to stop")

    uvicorn.run(app, host=config.server_host, port=port, log_level="info")


if __name__ == "__main__":
    main()
