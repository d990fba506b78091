import json
import logging
from pathlib import Path
from typing import Any, Dict
import jsonschema
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

STRICT = "STRICT"
LENIENT = "LENIENT"


class ContractError(Exception):
    """Raised when a document violates its data contract."""

    pass


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a JSON schema from the package."""
    schema_path = Path(__file__).parent.parent / "schemas" / f"{schema_name}.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    with open(schema_path, "r") as f:
        return dict(json.load(f))


def validate_document(data: Any, schema_name: str, mode: str = LENIENT) -> bool:
    """
    Validate data against a JSON schema.

    Args:
        data: The decoded JSON document to validate.
        schema_name: Name of the schema file (without .json extension).
        mode: 'STRICT' (raises error) or 'LENIENT' (logs warning).

    Returns:
        True when the document conforms, False on a lenient-mode violation.

    Raises:
        ContractError: If validation fails and mode is STRICT.
    """
    try:
        schema = load_schema(schema_name)
        jsonschema.validate(instance=data, schema=schema)
    except (ValidationError, FileNotFoundError) as e:
        msg = f"Data Contract Violation ({schema_name}): {e}"
        if mode == STRICT:
            raise ContractError(msg) from e
        logger.warning(msg)
        return False
    return True
