# Overview: JSON response envelope shared by every blueprint.

from __future__ import annotations

from flask import jsonify


def success(message: str = "Success", data=None, status: int = 200):
    body = {"status": "OK", "message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def error(message: str, status: int, details: dict | None = None):
    body = {"status": "ERROR", "message": message}
    if details:
        body["details"] = details
    return jsonify(body), status
