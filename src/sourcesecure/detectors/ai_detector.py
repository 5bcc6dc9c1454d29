"""Optional language-model assisted detection.

Sends the head of a file to a local Ollama server and turns the reply into
MEDIUM severity findings. The collaborator is strictly best effort: any
failure yields no findings, and a connection failure disables it for the
rest of the process.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from sourcesecure.core.models import AISettings, Finding, Severity, truncate_preview

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Analyze this code snippet for potential security issues. "
    'Only respond with JSON format: {{"hasSecrets": true/false, "findings": ["list of found secrets"]}}\n'
    "\n"
    "Code:\n"
    "{code}"
)


class AIAssistant:
    """Client for a local Ollama ``/api/generate`` endpoint.

    Args:
        settings: Endpoint, model and timeout.
        transport: Optional httpx transport, used to swap the network out.
    """

    def __init__(self, settings: AISettings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or AISettings()
        self._transport = transport
        self._available = True

    @property
    def available(self) -> bool:
        return self._available

    def build_prompt(self, content: str) -> str:
        return PROMPT_TEMPLATE.format(code=content[: self.settings.max_chars])

    async def analyze(self, content: str, file_path: str = "") -> list[Finding]:
        """Ask the model about ``content`` and return its findings."""
        if not self._available or not content.strip():
            return []

        payload = {
            "model": self.settings.model,
            "prompt": self.build_prompt(content),
            "format": "json",
            "stream": False,
        }
        try:
            async with httpx.AsyncClient(timeout=self.settings.timeout, transport=self._transport) as client:
                response = await client.post(self.settings.url, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.ConnectError as e:
            logger.debug(f"AI assist unavailable, disabling: {e}")
            self._available = False
            return []
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"AI assist request failed for {file_path}: {e}")
            return []

        return self._parse_reply(body, file_path)

    def _parse_reply(self, body: Any, file_path: str) -> list[Finding]:
        text = body.get("response", "") if isinstance(body, dict) else ""
        try:
            result = json.loads(text)
        except (TypeError, json.JSONDecodeError):
            logger.debug(f"AI assist returned non-JSON output for {file_path}")
            return []

        if not isinstance(result, dict) or not result.get("hasSecrets"):
            return []
        reported = result.get("findings") or []
        if not isinstance(reported, list):
            return []

        return [
            Finding(
                detector_name="AI-Detected Secret",
                file_path=file_path,
                line=0,
                match=truncate_preview(str(item)),
                severity=Severity.MEDIUM,
                source="ai",
                metadata={"model": self.settings.model},
            )
            for item in reported
            if str(item).strip()
        ]
