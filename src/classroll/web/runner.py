"""Uvicorn server runner with custom configuration."""

import copy
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from classroll.app import App
from classroll.config import Config
from classroll.web.server import create_fastapi_app

ACCESS_LOG_FORMAT = '%(asctime)s - classroll - %(client_addr)s "%(request_line)s" %(status_code)s'
DEFAULT_LOG_FORMAT = "%(asctime)s - classroll - %(levelname)s - %(message)s"


def build_log_config(config: Config) -> dict[str, Any]:
    """Uvicorn logging config tagged with the service name, verbose in debug mode."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = ACCESS_LOG_FORMAT
    log_config["formatters"]["default"]["fmt"] = DEFAULT_LOG_FORMAT
    log_config["loggers"]["uvicorn"]["level"] = "DEBUG" if config.debug else "INFO"
    return log_config


def run_server(app: App, config: Config) -> None:
    """Run the Uvicorn server with custom logging configuration."""
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(fastapi_app, host=config.host, port=config.port, log_config=build_log_config(config), access_log=True)
