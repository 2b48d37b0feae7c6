# Overview: Flask API routes for categories; parses input and returns JSON responses.

from flask import Blueprint, current_app, request

from ..errors import NotFoundError, ValidationError
from ..extensions import get_services
from ..validation import paginate, parse_category, parse_pagination
from .responses import error, success

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
def list_categories():
    """
    List categories.

    Query params:
    - page: int (optional) - page number (1-indexed). If omitted, returns all items.
    - limit: int (optional) - items per page (default 10, max 100)
    """
    page, limit = parse_pagination(
        request.args,
        default_limit=current_app.config["DEFAULT_PAGE_LIMIT"],
        max_limit=current_app.config["MAX_PAGE_LIMIT"],
    )
    try:
        categories = [c.to_dict() for c in get_services().categories.get_all()]
    except Exception:
        current_app.logger.exception("Failed to list categories")
        return error("Failed to retrieve categories", 500)

    if page is None:
        return success("Success", categories)
    return success("Success", paginate(categories, page=page, limit=limit))


@categories_bp.get("/<int(signed=True):category_id>")
def get_category(category_id: int):
    try:
        category = get_services().categories.get_by_id(category_id)
    except NotFoundError:
        return error("Category not found", 404)
    except ValidationError as e:
        return error(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to get category")
        return error("Failed to retrieve category", 500)
    return success("Success", category.to_dict())


@categories_bp.post("")
def create_category():
    payload = request.get_json(silent=True)
    try:
        category = parse_category(payload)
        created = get_services().categories.create(category)
    except ValidationError as e:
        return error(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to create category")
        return error("Failed to create category", 500)
    return success("Category created successfully", created.to_dict(), 201)


@categories_bp.put("/<int(signed=True):category_id>")
def update_category(category_id: int):
    payload = request.get_json(silent=True)
    try:
        category = parse_category(payload)
        updated = get_services().categories.update(category_id, category)
    except NotFoundError:
        return error("Category not found", 404)
    except ValidationError as e:
        return error(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to update category")
        return error("Failed to update category", 500)
    return success("Category updated successfully", updated.to_dict())


@categories_bp.delete("/<int(signed=True):category_id>")
def delete_category(category_id: int):
    try:
        get_services().categories.delete(category_id)
    except NotFoundError:
        return error("Category not found", 404)
    except ValidationError as e:
        return error(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to delete category")
        return error("Failed to delete category", 500)
    return success("Category deleted successfully")
