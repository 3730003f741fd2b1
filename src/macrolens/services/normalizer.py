"""Normalization of AI provider output into domain payloads.

Two modes are supported:

* ``schema``: the provider was asked to emit a declared JSON schema, so its
  text is parsed directly. A parse failure is fatal and surfaces as
  ``UnexpectedProviderResponseError``.
* ``free_text``: the provider only got formatting instructions in the
  prompt. The JSON payload is sliced out of the surrounding prose and any
  failure degrades to an empty result, which callers report as
  ``NoResultsError``.
"""

import json
import logging
from enum import StrEnum

from macrolens.domain.errors import UnexpectedProviderResponseError

logger = logging.getLogger(__name__)


class ExtractionMode(StrEnum):
    """How provider output is requested and parsed."""

    SCHEMA = "schema"
    FREE_TEXT = "free_text"


def parse_schema_output(text: str | None) -> dict[str, object]:
    """Parse schema-constrained output as a JSON object."""
    try:
        parsed = json.loads(text or "{}")
    except json.JSONDecodeError as exc:
        raise UnexpectedProviderResponseError(
            details=f"Provider output is not valid JSON: {exc.msg}"
        ) from exc
    if not isinstance(parsed, dict):
        raise UnexpectedProviderResponseError(
            details="Provider output is not a JSON object"
        )
    return parsed


def extract_json_array(text: str | None) -> list[object]:
    """Return the JSON array between the first '[' and the last ']'.

    Missing brackets, reversed brackets and unparseable slices all yield an
    empty list.
    """
    if not text:
        return []
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end == -1:
        return []
    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        logger.info("Discarding unparseable array slice from provider output")
        return []
    if not isinstance(parsed, list):
        return []
    return parsed


def extract_json_object(text: str | None) -> dict[str, object] | None:
    """Return the JSON object between the first '{' and the last '}'."""
    if not text:
        return None
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1:
        return None
    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        logger.info("Discarding unparseable object slice from provider output")
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def attach_references(
    items: list[object],
    references: list[str],
    key: str = "mapsUri",
) -> list[object]:
    """Attach reference i to item i, by position only.

    Exactly ``min(len(items), len(references))`` items receive a reference.
    Surplus references are dropped and surplus items are left as they are.
    Nothing checks that a reference actually belongs to its item, so
    provider output listing the two in different orders will misalign.
    Non-object items keep their slot but cannot carry a reference.
    """
    attached = []
    for index, item in enumerate(items):
        if index < len(references) and isinstance(item, dict):
            item = {**item, key: references[index]}
        attached.append(item)
    return attached
