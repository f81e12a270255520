"""
SmartSprint
Blueprint registry.
"""

from flask import request

from smartsprint.core.exceptions import ValidationError


def json_body() -> dict:
    """Request body as a dict. A missing body is ``{}``; anything else is 400."""
    if not request.data:
        return {}
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

