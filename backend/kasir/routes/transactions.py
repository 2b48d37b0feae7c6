# Overview: Flask API routes for checkout and transaction lookup.

from flask import Blueprint, current_app, request

from ..errors import NotFoundError, ValidationError
from ..extensions import get_services
from ..validation import parse_checkout
from .responses import error, success

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api")


@transactions_bp.post("/checkout")
def checkout():
    """
    Convert a cart into a stored transaction.

    Body: {"items": [{"product_id": 1, "quantity": 2}, ...]}
    """
    payload = request.get_json(silent=True)
    try:
        items = parse_checkout(payload)
        transaction = get_services().transactions.checkout(items)
    except NotFoundError as e:
        return error(str(e), 404)
    except ValidationError as e:
        return error(str(e), 400, details=e.details)
    except Exception:
        current_app.logger.exception("Failed to process checkout")
        return error("Failed to process checkout", 500)
    return success("Checkout successful", transaction.to_dict(), 201)


@transactions_bp.get("/transactions/<int(signed=True):transaction_id>")
def get_transaction(transaction_id: int):
    try:
        transaction = get_services().transactions.get_by_id(transaction_id)
    except NotFoundError as e:
        return error(str(e), 404)
    except Exception:
        current_app.logger.exception("Failed to get transaction")
        return error("Failed to retrieve transaction", 500)
    return success("Success", transaction.to_dict())
