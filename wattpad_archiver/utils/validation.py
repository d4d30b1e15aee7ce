"""
Schema checks for request payloads and MongoDB documents.
A schema is a dict whose keys are the document's field names.
"""


def validate_against_schema(data, schema, strict=False):
    """
    Project data onto the schema's fields

    Args:
        data: dict (request payload hoặc document đọc từ MongoDB)
        schema: STORY_SCHEMA / PROGRESS_SCHEMA / JOB_SCHEMA
        strict: True = every schema field must be present (value may be None)

    Returns:
        dict with exactly the schema's fields; absent ones are None,
        extras such as Mongo's _id are dropped

    Raises:
        ValueError: data is not a dict, or strict and a field is absent
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected dict, got {type(data).__name__}")

    if strict:
        absent = [name for name in schema if name not in data]
        if absent:
            raise ValueError(f"Missing required fields: {absent}")

    return {name: data.get(name) for name in schema}


def check_required_fields(data, required_fields):
    """
    Returns:
        (is_valid, missing) where missing lists fields that are absent,
        None or a blank string
    """
    if not isinstance(data, dict):
        return False, list(required_fields)

    missing = [
        name for name in required_fields
        if data.get(name) is None or (isinstance(data.get(name), str) and not data[name].strip())
    ]
    return not missing, missing
