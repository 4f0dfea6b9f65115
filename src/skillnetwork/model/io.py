"""
Analysis Service I/O
Parses skill-network responses of the external Analysis Service, either as
raw response text or as a response saved to a .json file.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class AnalysisResponseError(ValueError):
    """The response text could not be decoded as JSON."""


class AnalysisService(Protocol):
    """Anything that can turn resume text into a skill-network payload."""

    def generate_skill_network(self, resume_text: str) -> dict[str, Any]: ...


def clean_json(text: str | None) -> str:
    """
    Strip the markdown code fence the service sometimes wraps JSON in.

    Examples:
        '```json\\n{"nodes": []}\\n```' -> '{"nodes": []}'
        '' -> '{}'
    """
    clean = (text or "").strip()
    if not clean:
        return "{}"
    if clean.startswith("```json"):
        clean = clean[len("```json"):]
    elif clean.startswith("```"):
        clean = clean[len("```"):]
    else:
        return clean
    if clean.endswith("```"):
        clean = clean[:-3]
    return clean.strip()


def parse_network_response(text: str | None) -> dict[str, Any]:
    """
    Decode a skill-network response.

    Raises:
        AnalysisResponseError: If the text is not JSON or not a JSON object.
    """
    try:
        data = json.loads(clean_json(text))
    except json.JSONDecodeError as e:
        raise AnalysisResponseError(f"Analysis response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise AnalysisResponseError(
            f"Analysis response must be a JSON object, got {type(data).__name__}."
        )
    return data


def load_network_file(filepath: str) -> dict[str, Any]:
    """Read a saved response from disk."""
    logger.info(f"Loading skill network from: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        return parse_network_response(f.read())


class FileAnalysisService:
    """
    Serves a stored response instead of calling the remote service.
    The resume text is ignored.
    """

    def __init__(self, filepath: str) -> None:
        self.filepath = filepath

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({os.path.basename(self.filepath)!r})"

    def generate_skill_network(self, resume_text: str = "") -> dict[str, Any]:
        return load_network_file(self.filepath)
