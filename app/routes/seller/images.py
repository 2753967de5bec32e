from flask import request, jsonify, current_app
from app.schemas.product import ImageRemoveRequest
from app.services import storage
from app.utils import role_required, error
from app.utils.validation import validate_schema
from . import seller_bp


@seller_bp.route("/images", methods=["POST"])
@role_required("fbo:upload_images")
def upload_images():
    files = [f for f in request.files.getlist("files") if f and f.filename]
    if not files:
        return error("No files uploaded", status=400)
    limit = current_app.config["MAX_PRODUCT_IMAGES"]
    if len(files) > limit:
        return error(f"At most {limit} images per product", status=400)
    # Validate everything before writing anything
    for f in files:
        storage.validate_image(f)
    urls = [storage.put_image(request.user.id, f) for f in files]
    return jsonify({
        "status": "success",
        "message": f"{len(urls)} image(s) uploaded successfully",
        "urls": urls,
    }), 201


@seller_bp.route("/images/remove", methods=["POST"])
@role_required("fbo:upload_images")
@validate_schema(ImageRemoveRequest)
def remove_image():
    data: ImageRemoveRequest = request.validated_data
    removed = storage.remove(data.url, request.user.id)
    return jsonify({"status": "success", "removed": removed}), 200
