"""User profile, platform and profile picture endpoints."""

import functools
import asyncpg
import structlog
from quart import Blueprint, current_app, jsonify, request
from config.constants import (
    MSG_NO_FILE,
    MSG_PICTURE_UPLOADED,
    MSG_PLATFORMS_UPDATED,
    MSG_PROFILE_UPDATED,
    UPLOAD_FIELD,
)
from storage.database import get_pool
from storage.errors import UserStoreError
from storage.repositories.user_repo import UserRepository
from utils.validation import parse_platforms, parse_profile_update, parse_user_id

log = structlog.get_logger(__name__)

users_bp = Blueprint("users", __name__)


def store_errors(message: str):
    """Answer every store or validation failure with a generic 500 {error}.

    The failure kind is logged but not exposed to the caller.
    """

    def decorator(f):
        @functools.wraps(f)
        async def decorated(*args, **kwargs):
            try:
                return await f(*args, **kwargs)
            except UserStoreError as e:
                log.warning(
                    "user_request_failed",
                    route=f.__name__,
                    kind=e.kind,
                    error=str(e),
                    **kwargs,
                )
            except (asyncpg.PostgresError, OSError) as e:
                log.error(
                    "user_store_unavailable",
                    route=f.__name__,
                    error=str(e),
                    **kwargs,
                )
            return jsonify({"error": message}), 500

        return decorated

    return decorator


async def _repo() -> UserRepository:
    return UserRepository(await get_pool())


@users_bp.route("/<user_id>", methods=["GET"])
@store_errors("Failed to fetch user")
async def get_user(user_id: str):
    uid = parse_user_id(user_id)
    profile = await (await _repo()).get_profile(uid)
    return jsonify(profile)


@users_bp.route("/<user_id>", methods=["PUT"])
@store_errors("Failed to update user")
async def update_user(user_id: str):
    uid = parse_user_id(user_id)
    changes = parse_profile_update(await request.get_json(silent=True))
    await (await _repo()).update_profile(uid, changes)
    return jsonify({"message": MSG_PROFILE_UPDATED})


@users_bp.route("/<user_id>/platforms", methods=["GET"])
@store_errors("Failed to fetch platforms")
async def get_platforms(user_id: str):
    uid = parse_user_id(user_id)
    platforms = await (await _repo()).get_platforms(uid)
    return jsonify(platforms)


@users_bp.route("/<user_id>/platforms", methods=["PUT"])
@store_errors("Failed to update platforms")
async def update_platforms(user_id: str):
    uid = parse_user_id(user_id)
    platforms = parse_platforms(await request.get_json(silent=True))
    await (await _repo()).replace_platforms(uid, platforms)
    return jsonify({"message": MSG_PLATFORMS_UPDATED})


@users_bp.route("/<user_id>/profilePicture", methods=["GET"])
@store_errors("Failed to fetch profile picture")
async def get_profile_picture(user_id: str):
    uid = parse_user_id(user_id)
    reference = await (await _repo()).get_profile_picture(uid)
    return jsonify({"profile_picture": reference})


@users_bp.route("/<user_id>/uploadPicture", methods=["PUT"])
@store_errors("Failed to upload profile picture")
async def upload_picture(user_id: str):
    files = await request.files
    upload = files.get(UPLOAD_FIELD)
    if upload is None or not upload.filename:
        return jsonify({"error": MSG_NO_FILE}), 400
    data = upload.read()
    if not data:
        return jsonify({"error": MSG_NO_FILE}), 400

    uid = parse_user_id(user_id)
    pictures = current_app.picture_store  # type: ignore[attr-defined]
    reference = pictures.save(uid, upload.filename, data)
    try:
        previous = await (await _repo()).set_profile_picture(uid, reference)
    except Exception:
        pictures.remove(reference)
        raise

    if previous and previous != reference:
        pictures.remove(previous, owner=uid)
    return jsonify({"message": MSG_PICTURE_UPLOADED})
