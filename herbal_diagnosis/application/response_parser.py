"""
Name: Diagnosis Response Parser

Responsibilities:
  - Turn the generation reply into a DiagnosisRecord
  - Reject anything that does not match the schema exactly

Collaborators:
  - application/diagnosis_chain.py: absorbs ResponseParseError into fallback

Constraints:
  - Exactly the nine wire keys, no more, no less
  - String fields: non-empty str; list fields: non-empty list of non-empty str
  - A single surrounding markdown code fence is tolerated
"""

import json
import re
from typing import Any, Dict

from ..domain.entities import DiagnosisRecord
from ..exceptions import ResponseParseError

LIST_FIELDS = frozenset({"recommendedHerbs", "benefits"})
WIRE_KEYS = tuple(wire_key for wire_key, _ in DiagnosisRecord.WIRE_FIELDS)

_FENCE = re.compile(r"^```[A-Za-z0-9_-]*\s*\n(?P<body>.*?)\n?```$", re.DOTALL)


def strip_code_fence(content: str) -> str:
    text = content.strip()
    match = _FENCE.match(text)
    return match.group("body").strip() if match else text


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def parse_diagnosis_record(content: str) -> DiagnosisRecord:
    """
    R: Parse and validate a diagnosis JSON reply.

    Raises:
        ResponseParseError: not JSON, not an object, wrong keys or wrong types
    """
    if not isinstance(content, str) or not content.strip():
        raise ResponseParseError("Empty generation reply")

    try:
        data = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as exc:
        raise ResponseParseError(
            f"Generation reply is not valid JSON: {exc.msg}", original_error=exc
        ) from exc

    if not isinstance(data, dict):
        raise ResponseParseError("Generation reply must be a JSON object")

    missing = [key for key in WIRE_KEYS if key not in data]
    extra = sorted(key for key in data if key not in WIRE_KEYS)
    if missing or extra:
        raise ResponseParseError(
            f"Generation reply keys mismatch (missing={missing}, extra={extra})"
        )

    errors = _type_errors(data)
    if errors:
        raise ResponseParseError("Invalid field(s): " + ", ".join(errors))

    return DiagnosisRecord.from_dict(
        {key: list(data[key]) if key in LIST_FIELDS else data[key] for key in WIRE_KEYS}
    )


def _type_errors(data: Dict[str, Any]) -> list:
    errors = []
    for key in WIRE_KEYS:
        value = data[key]
        if key in LIST_FIELDS:
            if (
                not isinstance(value, list)
                or not value
                or not all(_is_non_empty_str(item) for item in value)
            ):
                errors.append(key)
        elif not _is_non_empty_str(value):
            errors.append(key)
    return errors
