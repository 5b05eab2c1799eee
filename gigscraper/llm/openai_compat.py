"""OpenAI extractor.

Talks to the OpenAI chat completions API, or to any OpenAI-compatible
endpoint when a base_url is given, via the openai Python SDK.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, AuthenticationError

from gigscraper.llm.base import LLMExtractor
from gigscraper.llm.prompts import build_system_prompt, build_user_prompt
from gigscraper.core.errors import ExtractionError, FatalError
from gigscraper.core.schemas import Event
from gigscraper.core.time_utils import DEFAULT_TIMEZONE
from gigscraper.core.validation import normalize_events_payload

logger = logging.getLogger(__name__)

CLOSERS = {"{": "}", "[": "]"}


class OpenAICompatExtractor(LLMExtractor):
    """Event extractor using the OpenAI API or a compatible endpoint."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini",
                 endpoint_url: Optional[str] = None, temperature: float = 0.3,
                 timezone: str = DEFAULT_TIMEZONE):
        self.client = AsyncOpenAI(api_key=api_key, base_url=endpoint_url)
        self.model = model
        self.temperature = temperature
        self.timezone = timezone

    def _clean_response_text(self, text: str) -> str:
        """Clean LLM response text, removing markdown code blocks."""
        text = text.strip()
        if text.startswith("```"):
            text = text.split("```")[1]
            if text.startswith("json"):
                text = text[4:]
            text = text.strip()
        return text

    @staticmethod
    def _missing_closers(text: str) -> str:
        """Return the brackets needed to close every object/array left open."""
        stack = []
        in_string = False
        escaped = False
        for char in text:
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char in CLOSERS:
                stack.append(CLOSERS[char])
            elif stack and char == stack[-1]:
                stack.pop()
        return "".join(reversed(stack))

    def _repair_json(self, text: str) -> Optional[Dict[str, Any]]:
        """Attempt to repair truncated JSON.

        Cuts the text after the last complete object, then closes whatever
        arrays and objects are still open.
        """
        last_brace = text.rfind("}")
        truncated = text[:last_brace + 1] if last_brace != -1 else text

        try:
            return json.loads(truncated)
        except json.JSONDecodeError:
            pass

        try:
            return json.loads(truncated + self._missing_closers(truncated))
        except json.JSONDecodeError:
            return None

    def _build_messages(self, url: str, content: str, screenshot_b64: Optional[str]) -> list:
        prompt = build_user_prompt(url, content)
        if screenshot_b64:
            user_content = [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:image/jpeg;base64,{screenshot_b64}"},
                },
            ]
        else:
            user_content = prompt

        return [
            {"role": "system", "content": build_system_prompt(self.timezone)},
            {"role": "user", "content": user_content},
        ]

    async def _call_llm(self, url: str, content: str, screenshot_b64: Optional[str]) -> Any:
        """Call the model and return its parsed JSON reply.

        Raises ExtractionError when the reply is not valid (or repairable) JSON.
        """
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=self._build_messages(url, content, screenshot_b64),
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )
        response_text = response.choices[0].message.content
        if not response_text:
            return {}

        response_text = self._clean_response_text(response_text)
        try:
            return json.loads(response_text)
        except json.JSONDecodeError as json_error:
            logger.warning(f"JSON parse failed for {url}, attempting repair: {json_error}")
            repaired = self._repair_json(response_text)
            if repaired is None:
                raise ExtractionError(url, f"invalid JSON in model response: {json_error}") from json_error
            logger.info("JSON repair successful")
            return repaired

    async def extract_events(
        self,
        url: str,
        content: str,
        screenshot_b64: Optional[str] = None,
    ) -> List[Event]:
        """Extract all upcoming events from shaped webpage content."""
        logger.info(f"Sending {len(content)} chars to {self.model} for {url} (screenshot={bool(screenshot_b64)})")
        try:
            payload = await self._call_llm(url, content, screenshot_b64)
            events = normalize_events_payload(payload, url)
        except AuthenticationError as e:
            raise FatalError(f"Extraction service rejected the API key: {e}") from e
        except Exception as e:
            logger.error(f"Error extracting events from {url}: {e}")
            return []

        logger.info(f"Extracted {len(events)} events from {url}")
        return events
