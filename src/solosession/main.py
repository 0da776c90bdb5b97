"""Application entry point for the solosession backend server."""

from solosession.app import App
from solosession.config import Config
from solosession.logging import setup_logging
from solosession.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App.from_config(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
