"""Quart app factory for the user profile service."""

import structlog
from quart import Quart
from config.settings import settings
from storage.pictures import PictureStore

log = structlog.get_logger(__name__)


def create_app(picture_store: PictureStore | None = None) -> Quart:
    """Create and configure the web application."""
    app = Quart(__name__)

    # Shared with the routes through current_app
    app.picture_store = picture_store or PictureStore(settings.upload_dir)  # type: ignore[attr-defined]

    from web.routes.users import users_bp
    from web.routes.uploads import uploads_bp

    app.register_blueprint(users_bp, url_prefix="/users")
    app.register_blueprint(uploads_bp, url_prefix="/uploads")

    @app.route("/health")
    async def health():
        return {"status": "ok"}, 200

    return app
