from flask import request, jsonify
from app.schemas.catalog import BulkDeleteRequest, ProductCreateRequest, ProductUpdateRequest
from app.services import catalog
from app.utils import validate_schema
from . import seller_bp


def _image_upload():
    image = request.files.get("image")
    if image is None or not image.filename:
        return None
    return image


@seller_bp.route("/products", methods=["POST"])
@validate_schema(ProductCreateRequest)
def add_product():
    """Create a product (JSON, or multipart with an ``image`` file).
    ---
    tags: [Seller]
    responses:
      201: {description: Product created}
      400: {description: Validation error}
    """
    data = request.validated_data.model_dump()
    product = catalog.create_product(request.user.uid, data, image=_image_upload())
    return jsonify({"status": "success", "message": "Product added", "product": product.to_dict()}), 201


@seller_bp.route("/products", methods=["GET"])
def my_products():
    products = catalog.list_seller_products(
        request.user.uid,
        category=request.args.get("category") or None,
        search=(request.args.get("q") or "").strip() or None,
    )
    return jsonify({"status": "success", "data": [p.to_dict() for p in products]}), 200


@seller_bp.route("/products/<int:product_id>", methods=["GET"])
def get_product(product_id):
    product = catalog.get_seller_product(request.user.uid, product_id)
    return jsonify({"status": "success", "product": product.to_dict()}), 200


@seller_bp.route("/products/<int:product_id>", methods=["PATCH", "POST"])
@validate_schema(ProductUpdateRequest)
def update_product(product_id):
    data = request.validated_data.model_dump(exclude_none=True)
    product = catalog.update_product(request.user.uid, product_id, data, image=_image_upload())
    return jsonify({"status": "success", "message": "Product updated", "product": product.to_dict()}), 200


@seller_bp.route("/products/<int:product_id>", methods=["DELETE"])
def delete_product(product_id):
    catalog.delete_product(request.user.uid, product_id)
    return jsonify({"status": "success", "message": "Product deleted"}), 200


@seller_bp.route("/products/bulk-delete", methods=["POST"])
@validate_schema(BulkDeleteRequest)
def bulk_delete_products():
    deleted = catalog.delete_products(request.user.uid, request.validated_data.product_ids)
    return jsonify({"status": "success", "message": f"{len(deleted)} products deleted", "deleted": deleted}), 200
