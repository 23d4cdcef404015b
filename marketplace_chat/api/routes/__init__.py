# marketplace_chat/api/routes/__init__.py

from flask import Flask

from marketplace_chat.api.routes.conversation_routes import bp_conv
from marketplace_chat.api.routes.health_routes import bp_health
from marketplace_chat.api.routes.message_routes import bp_msg
from marketplace_chat.api.routes.moderation_routes import bp_moderation
from marketplace_chat.api.routes.unread_routes import bp_unread


def register_routes(app: Flask, *, api_prefix: str, app_prefix: str) -> None:
    # health outside /api, inside the app prefix
    app.register_blueprint(bp_health, url_prefix=f"{app_prefix}/health")

    messaging = f"{api_prefix}/messaging"
    app.register_blueprint(bp_conv, url_prefix=f"{messaging}/conversations")
    app.register_blueprint(
        bp_msg, url_prefix=f"{messaging}/conversations/<conversation_id>/messages"
    )
    app.register_blueprint(bp_unread, url_prefix=f"{messaging}/unread")

    app.register_blueprint(bp_moderation, url_prefix=f"{api_prefix}/admin/messaging")
