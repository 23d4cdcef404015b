from flask import Flask

from marketplace_chat.config.settings import Settings


def configure_app(app: Flask, app_settings: Settings) -> None:
    app.config["ENV"] = app_settings.environment
    app.config["DEBUG"] = app_settings.debug
    app.json.sort_keys = False
