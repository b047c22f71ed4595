from flask import Blueprint, current_app, send_from_directory

media_bp = Blueprint("media", __name__)


@media_bp.route("/media/<path:object_path>", methods=["GET"])
def serve_image(object_path):
    return send_from_directory(current_app.config["IMAGE_STORAGE_DIR"], object_path)
