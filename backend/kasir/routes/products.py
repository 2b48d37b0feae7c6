# Overview: Flask API routes for products operations; parses input and returns JSON responses.

from flask import Blueprint, current_app, request

from ..errors import CategoryNotFoundError, NotFoundError, ValidationError
from ..extensions import get_services
from ..validation import paginate, parse_pagination, parse_product
from .responses import error, success

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products.

    Query params:
    - name: str (optional) - case-insensitive substring match on product name
    - page: int (optional) - page number (1-indexed). If omitted, returns all items.
    - limit: int (optional) - items per page (default 10, max 100)
    """
    name = request.args.get("name", "").strip()
    page, limit = parse_pagination(
        request.args,
        default_limit=current_app.config["DEFAULT_PAGE_LIMIT"],
        max_limit=current_app.config["MAX_PAGE_LIMIT"],
    )
    try:
        products = [p.to_dict() for p in get_services().products.get_all(name_filter=name)]
    except Exception:
        current_app.logger.exception("Failed to list products")
        return error("Failed to retrieve products", 500)

    if page is None:
        return success("Success", products)
    return success("Success", paginate(products, page=page, limit=limit))


@products_bp.get("/<int(signed=True):product_id>")
def get_product(product_id: int):
    try:
        product = get_services().products.get_by_id(product_id)
    except NotFoundError:
        return error("Product not found", 404)
    except ValidationError as e:
        return error(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to get product")
        return error("Failed to retrieve product", 500)
    return success("Success", product.to_dict())


@products_bp.post("")
def create_product():
    payload = request.get_json(silent=True)
    try:
        product = parse_product(payload)
        created = get_services().products.create(product)
    except (ValidationError, CategoryNotFoundError) as e:
        # A dangling category_id is bad input here, not a missing resource
        return error(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return error("Failed to create product", 500)
    return success("Product created successfully", created.to_dict(), 201)


@products_bp.put("/<int(signed=True):product_id>")
def update_product(product_id: int):
    payload = request.get_json(silent=True)
    try:
        product = parse_product(payload)
        updated = get_services().products.update(product_id, product)
    except (ValidationError, CategoryNotFoundError) as e:
        return error(str(e), 400)
    except NotFoundError:
        return error("Product not found", 404)
    except Exception:
        current_app.logger.exception("Failed to update product")
        return error("Failed to update product", 500)
    return success("Product updated successfully", updated.to_dict())


@products_bp.delete("/<int(signed=True):product_id>")
def delete_product(product_id: int):
    try:
        get_services().products.delete(product_id)
    except NotFoundError:
        return error("Product not found", 404)
    except ValidationError as e:
        return error(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return error("Failed to delete product", 500)
    return success("Product deleted successfully")
