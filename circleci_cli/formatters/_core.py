"""Core output dispatchers."""

import json

from circleci_cli.models import _Record


def to_jsonable(data):
    """Turn records (and lists/dicts of records) into plain JSON data."""
    if isinstance(data, _Record):
        return data.to_dict()
    if isinstance(data, list):
        return [to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    return data


def pretty_print(data):
    print(json.dumps(to_jsonable(data), indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="json"):
    """Output data in requested format."""
    if fmt == "table" and formatter:
        print(formatter(data))
    else:
        pretty_print(data)
