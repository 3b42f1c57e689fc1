#!/usr/bin/env python3
# ABOUTME: Request, result and preset data types plus response validation.
# ABOUTME: Model output is checked against an exact schema before use.

import json
from dataclasses import dataclass
from typing import Any, Dict, List

from quadslator.errors import GenerationError

DEFAULT_CONTEXT = "general"
TRANSLATION_COUNT = 4


@dataclass(frozen=True)
class TranslationRequest:
    """A single submission: the text to translate and its context."""

    prompt: str
    context: str = ""

    @property
    def effective_context(self) -> str:
        """The context sent to the model; blank contexts become "general"."""
        return self.context if self.context.strip() else DEFAULT_CONTEXT

    def to_payload(self) -> Dict[str, str]:
        return {"prompt": self.prompt, "context": self.effective_context}


@dataclass(frozen=True)
class SavedContext:
    """A named context preset."""

    name: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, record: Any) -> "SavedContext":
        """Build a preset from a stored record.

        Raises:
            ValueError: If the record is not a {name, value} mapping of strings
        """
        if not isinstance(record, dict):
            raise ValueError(f"Preset record must be an object, got {type(record).__name__}")
        name = record.get("name")
        value = record.get("value")
        if not isinstance(name, str) or not isinstance(value, str):
            raise ValueError("Preset record requires string 'name' and 'value' fields")
        return cls(name=name, value=value)


def strip_code_fence(raw: str) -> str:
    """Strip a markdown code fence (```json ... ```) wrapped around model output."""
    text = raw.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        if lines[-1].strip() == "```":
            lines = lines[1:-1]
        else:
            lines = lines[1:]
        text = "\n".join(lines).strip()
    return text


def parse_json_object(raw: str) -> Dict[str, Any]:
    """Parse model output into a JSON object.

    Raises:
        GenerationError: If the output is empty, not JSON, or not an object
    """
    if not raw or not raw.strip():
        raise GenerationError("Model returned an empty response")

    text = strip_code_fence(raw)
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise GenerationError(f"Model returned non-JSON output: {text[:200]}") from e

    if not isinstance(data, dict):
        raise GenerationError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _string_list(data: Dict[str, Any], field: str) -> List[str]:
    if set(data.keys()) != {field}:
        raise GenerationError(
            f"Expected exactly the field '{field}', got {sorted(data.keys())}"
        )
    values = data[field]
    if not isinstance(values, list):
        raise GenerationError(f"Field '{field}' must be an array")
    if not all(isinstance(v, str) for v in values):
        raise GenerationError(f"Field '{field}' must contain only strings")
    return list(values)


def validate_translations(data: Dict[str, Any]) -> List[str]:
    """Validate a {"translations": [...]} response.

    Returns:
        The four translations in the order the model returned them

    Raises:
        GenerationError: If the shape, types or count do not match
    """
    translations = _string_list(data, "translations")
    if len(translations) != TRANSLATION_COUNT:
        raise GenerationError(
            f"Expected {TRANSLATION_COUNT} translations, received {len(translations)}"
        )
    return translations


def validate_suggestions(data: Dict[str, Any]) -> List[str]:
    """Validate a {"suggestions": [...]} response."""
    return _string_list(data, "suggestions")
