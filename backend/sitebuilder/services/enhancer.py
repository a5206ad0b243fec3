# sitebuilder/services/enhancer.py
import json
import logging
from typing import Any, Dict, Union

import requests

from sitebuilder.domain.errors import EnhancementParseError

logger = logging.getLogger(__name__)

DEFAULT_ENHANCE_API_URL = "http://localhost:5173/api/chat"

SYSTEM_PROMPT = """You are enhancing an existing website builder project. The user will provide:
1. A project JSON structure containing pages, components, and styling
2. An enhancement request

Your task is to:
- Understand the current project structure
- Apply the requested enhancements while maintaining JSON structure integrity
- Return ONLY the enhanced project JSON, nothing else
- Preserve all existing IDs unless creating new components
- Maintain the project structure format exactly

Important: Return ONLY valid JSON. Do not include any explanatory text, markdown formatting, or code blocks."""


def build_messages(project: Dict[str, Any], instruction: str) -> list:
    user_prompt = (
        "Current Project:\n"
        f"{json.dumps(project, indent=2)}\n\n"
        "Enhancement Request:\n"
        f"{instruction}\n\n"
        "Please return the enhanced project JSON."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def extract_content(data: Any) -> Union[Dict[str, Any], str]:
    """The chat endpoint answers with `content`, `message.content` or the project itself."""
    if isinstance(data, dict):
        if data.get("content"):
            return data["content"]
        message = data.get("message")
        if isinstance(message, dict) and message.get("content"):
            return message["content"]
    return data


class HttpEnhancementTransform:
    """
    Enhancement transform backed by a chat completion endpoint.

    Called as ``transform(project_dict, instruction)``; returns the raw
    enhanced project (mapping or JSON text) for the application layer to
    parse and validate.
    """

    def __init__(self, url: str = DEFAULT_ENHANCE_API_URL, timeout: float = 120.0, session=None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def __call__(self, project: Dict[str, Any], instruction: str) -> Union[Dict[str, Any], str]:
        body = {"messages": build_messages(project, instruction), "stream": False}

        try:
            response = self.session.post(self.url, json=body, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("enhancement endpoint %s failed: %s", self.url, exc)
            raise EnhancementParseError("AI enhancement failed. Please try again.") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise EnhancementParseError("Failed to parse AI response as JSON") from exc

        return extract_content(data)
