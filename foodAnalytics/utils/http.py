import json

from foodAnalytics.exceptions import ValidationError


def parse_json_body(request) -> dict:
    """Decode a JSON object request body; an empty body reads as ``{}``."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (UnicodeDecodeError, ValueError) as exc:
        raise ValidationError("Request body must be valid JSON.") from exc
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def user_payload(user) -> dict:
    return {"id": user.pk, "name": user.first_name, "email": user.email}
