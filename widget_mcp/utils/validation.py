"""Input validation utilities."""
from typing import Any, Dict, List

_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "boolean": lambda v: isinstance(v, bool),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "array": lambda v: isinstance(v, list),
    "object": lambda v: isinstance(v, dict),
}


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def validate_input(schema: Dict[str, Any], data: Dict[str, Any]) -> List[str]:
    """Validate tool arguments against a JSON-Schema-like input schema.

    Only the subset of JSON Schema used by the tool descriptors is checked:
    required fields, primitive types, enums, string length and numeric bounds.
    Unknown argument names are ignored.

    Returns:
        A list of human-readable error messages; empty when valid.
    """
    errors: List[str] = []
    properties = schema.get("properties", {})

    for field in schema.get("required", []):
        if _is_missing(data.get(field)):
            errors.append(f"{field} is required")

    for key, value in data.items():
        field_schema = properties.get(key)
        if not field_schema or value is None:
            continue

        field_type = field_schema.get("type")
        check = _TYPE_CHECKS.get(field_type)
        if check is not None and not check(value):
            article = "an" if field_type[0] in "aeiou" else "a"
            errors.append(f"{key} must be {article} {field_type}")
            continue

        if "enum" in field_schema and value not in field_schema["enum"]:
            allowed = ", ".join(str(option) for option in field_schema["enum"])
            errors.append(f"{key} must be one of: {allowed}")

        if isinstance(value, str):
            min_length = field_schema.get("minLength")
            max_length = field_schema.get("maxLength")
            if min_length is not None and len(value) < min_length:
                errors.append(f"{key} must be at least {min_length} characters")
            if max_length is not None and len(value) > max_length:
                errors.append(f"{key} must be at most {max_length} characters")
        elif field_type in ("number", "integer"):
            minimum = field_schema.get("minimum")
            maximum = field_schema.get("maximum")
            if minimum is not None and value < minimum:
                errors.append(f"{key} must be at least {minimum}")
            if maximum is not None and value > maximum:
                errors.append(f"{key} must be at most {maximum}")

    return errors
