"""Application entry point for the Classroll auth server."""

from classroll.app import App
from classroll.config import Config
from classroll.logging import setup_logging
from classroll.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
