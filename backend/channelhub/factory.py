"""Application factory for the ChannelHub API."""

from __future__ import annotations

from flask import Flask

from channelhub.core.config import BaseConfig, get_config
from channelhub.core.logger import configure_logging


def create_app(config: str | type[BaseConfig] | object | None = None) -> Flask:
    """Build the Flask app.

    Parameters
    ----------
    config:
        Config class, object or import path. Defaults to the class selected
        by ``APP_ENV``. An ``instance/config.py`` file, when present, is
        applied on top.

    Notes
    -----
    Order matters: logging before anything logs, extensions (database, JWT,
    object storage) before the blueprints that use them, and error handlers
    last so they cover every registered route.
    """

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(get_config() if config is None else config)
    app.config.from_pyfile("config.py", silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from channelhub import api
    from channelhub.core import cors, errors, extensions, logger, proxy

    for component in (proxy, extensions, logger, cors, api, errors):
        component.init_app(app)

    return app
