"""Read-only access to stored profile pictures."""

from quart import Blueprint, abort, current_app, send_file

uploads_bp = Blueprint("uploads", __name__)


@uploads_bp.route("/<reference>")
async def get_upload(reference: str):
    path = current_app.picture_store.path_for(reference)  # type: ignore[attr-defined]
    if path is None:
        abort(404)
    return await send_file(path)
