"""Load an OpenAPI document into a generic JSON tree.

JSON is tried first; YAML (a superset of JSON) is the fallback so that YAML
authored documents can be read as well.
"""

import json
from pathlib import Path
from typing import IO, Any

import yaml

from openapi_graph.exceptions import DocumentLoadError


def detect_format(text: str) -> str:
    """Detect the syntax of a document.

    Returns: 'json' or 'yaml'.
    """
    try:
        json.loads(text)
        return "json"
    except (json.JSONDecodeError, ValueError):
        return "yaml"


def load_text(text: str) -> Any:
    """Parse document text into dicts, lists and scalars."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        pass

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"Document is neither valid JSON nor YAML: {e}") from e
    return _stringify_keys(data)


def load_stream(stream: IO) -> Any:
    """Read a binary or text stream and parse its content."""
    content = stream.read()
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DocumentLoadError(f"Document is not valid UTF-8: {e}") from e
    return load_text(content)


def load_path(file_path: Path) -> Any:
    return load_text(Path(file_path).read_text(encoding="utf-8-sig"))


def _stringify_keys(value: Any, path: frozenset[int] = frozenset()) -> Any:
    # YAML allows non-string keys (e.g. unquoted status codes like 200)
    if not isinstance(value, (dict, list)):
        return value
    if id(value) in path:
        raise DocumentLoadError("Document contains a YAML alias that refers to one of its own ancestors")
    path = path | {id(value)}
    if isinstance(value, dict):
        return {str(k): _stringify_keys(v, path) for k, v in value.items()}
    return [_stringify_keys(item, path) for item in value]
