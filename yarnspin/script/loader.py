"""
Dialog loading - script text or compiled JSON in, resolved Dialog out.

Every function here either returns a complete Dialog or raises a
LoadError subclass; there is no partially loaded result.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Optional

import jsonschema
from pydantic import ValidationError

from yarnspin.core.errors import SchemaValidationError, ScriptIOError
from yarnspin.script.nodes import Node
from yarnspin.script.parser import DialogParser
from yarnspin.script.resolver import Dialog, resolve_nodes

logger = logging.getLogger(__name__)

SCHEMA_NAME = "dialog.schema.json"


def load(text: str, dialog_id: str = "dialog") -> Dialog:
    """
    Parse and resolve a script.

    Raises:
        ParseError: grammar violation
        DuplicateNodeTitleError: two nodes share a title
        UnknownNodeReferenceError: a jump/option names a missing node
    """
    nodes = DialogParser().parse_string(text)
    return resolve_nodes(nodes, dialog_id)


def read_text(path: str | Path) -> str:
    """Read a UTF-8 source file, converting failures to ScriptIOError."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptIOError(f"Could not read {path}: {e}") from e


def load_file(path: str | Path) -> Dialog:
    """Load a script file. The dialog id is the file stem."""
    path = Path(path)
    dialog = load(read_text(path), dialog_id=path.stem)
    logger.debug(f"Loaded {path} ({len(dialog)} nodes)")
    return dialog


# Compiled JSON


@lru_cache(maxsize=1)
def dialog_schema() -> dict[str, Any]:
    """The JSON schema compiled dialogs must match."""
    source = resources.files("yarnspin.resources").joinpath("schemas").joinpath(SCHEMA_NAME)
    return json.loads(source.read_text(encoding="utf-8"))


def dialog_to_json(dialog: Dialog) -> dict[str, Any]:
    """Convert a dialog to its compiled JSON form."""
    return {
        "id": dialog.id,
        "nodes": [node.model_dump(mode="json") for node in dialog.nodes],
    }


def save_json(dialog: Dialog, path: str | Path) -> None:
    """Save a dialog as compiled JSON."""
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(dialog_to_json(dialog), f, indent=2)


def load_json(data: dict[str, Any]) -> Dialog:
    """
    Build a dialog from compiled JSON.

    Stored target indices are ignored; references are resolved again
    from titles.

    Raises:
        SchemaValidationError: data does not match the dialog schema
    """
    try:
        jsonschema.validate(instance=data, schema=dialog_schema())
    except jsonschema.ValidationError as e:
        raise SchemaValidationError(f"Invalid compiled dialog: {e.message}") from e

    try:
        nodes = [Node.model_validate(node_data) for node_data in data["nodes"]]
    except ValidationError as e:
        raise SchemaValidationError(f"Invalid compiled dialog: {e}") from e

    return resolve_nodes(nodes, data["id"])


def load_json_file(path: str | Path) -> Dialog:
    path = Path(path)
    try:
        data = json.loads(read_text(path))
    except json.JSONDecodeError as e:
        raise SchemaValidationError(f"{path} is not valid JSON: {e}") from e
    return load_json(data)


def compile_dialog_file(input_path: str | Path, output_path: Optional[str | Path] = None) -> Path:
    """
    Compile a dialog script to JSON.

    Args:
        input_path: Path to .yarn file
        output_path: Path to output .json file (default: same name with .json)

    Returns:
        The path written
    """
    input_path = Path(input_path)
    if output_path is None:
        output_path = input_path.with_suffix('.json')
    else:
        output_path = Path(output_path)

    save_json(load_file(input_path), output_path)
    logger.info(f"Compiled {input_path} -> {output_path}")
    return output_path
