import os
from flask import Blueprint, send_from_directory
from werkzeug.exceptions import NotFound

from app.services import storage

storage_bp = Blueprint("storage", __name__)

PUBLIC_BUCKETS = {storage.PRODUCT_IMAGES}


@storage_bp.route("/storage/<bucket>/<path:filename>", methods=["GET"])
def serve_object(bucket, filename):
    if bucket not in PUBLIC_BUCKETS:
        raise NotFound()
    root = storage.bucket_dir(bucket)
    if not os.path.isdir(root):
        raise NotFound()
    return send_from_directory(root, filename)
