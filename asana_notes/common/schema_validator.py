"""
Structural validation of decoded task records against the bundled JSON schema.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Tuple

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, ValidationError, best_match

logger = logging.getLogger(__name__)

TASK_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "task.schema.json"


@lru_cache(maxsize=None)
def task_validator(schema_path: Path = TASK_SCHEMA_PATH) -> Draft202012Validator:
    """Compile the task schema once; every input line reuses the validator."""
    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        Draft202012Validator.check_schema(schema)
    except (OSError, json.JSONDecodeError, SchemaError) as e:
        logger.error(f"Cannot use task schema {schema_path}: {e}")
        raise
    return Draft202012Validator(schema)


def describe_error(error: ValidationError) -> str:
    """Prefix a validation message with the field it concerns, e.g. "name: ..."."""
    location = "/".join(str(part) for part in error.absolute_path)
    return f"{location}: {error.message}" if location else error.message


def validate_task_record(record: Any, schema_path: Path = TASK_SCHEMA_PATH) -> Tuple[bool, Optional[str]]:
    """
    Check a decoded record against the task schema.

    Only the most relevant violation is reported when several apply.

    Returns:
        Tuple of (is_valid, error_message)
    """
    error = best_match(task_validator(schema_path).iter_errors(record))
    if error is None:
        return True, None
    return False, describe_error(error)
