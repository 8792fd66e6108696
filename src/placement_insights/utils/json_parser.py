"""Utility to extract a JSON object from LLM responses."""

from __future__ import annotations

import json


def extract_json(text: str) -> dict:
    """Extract a JSON object from LLM response text.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers (```json ... ```) and parse
    3. First '{' to last '}' and parse

    Raises ValueError when no JSON object can be recovered, including when
    the payload parses but is not an object.
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected text from LLM, got {type(text).__name__}")
    text = text.strip()

    for candidate in (text, _strip_code_fences(text), _brace_span(text)):
        if not candidate:
            continue
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")
    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]
    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _brace_span(text: str) -> str:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return ""
    return text[start : end + 1]
