"""Claude API client producing productivity reports and spreadsheet rows."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Sequence

import pydantic
from anthropic import AsyncAnthropic, APIError, RateLimitError

from productivity_tracker.ai.prompts import (
    CREATE_SPREADSHEET_TOOL,
    EXPORT_SYSTEM_PROMPT,
    REPORT_SYSTEM_PROMPT,
    format_export_prompt,
    format_report_prompt,
)
from productivity_tracker.ai.schemas import ProductivityReport, SheetExport, SheetRow
from productivity_tracker.core.session_log import LogEntry
from productivity_tracker.errors import CollaboratorError

logger = logging.getLogger(__name__)


class ClaudeClient:
    """Async Claude API client acting as both summarizer and exporter."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-haiku-4-5-20251001",
        max_tokens: int = 1024,
        max_retries: int = 1,
        base_delay: float = 1.0,
        client: AsyncAnthropic | None = None,
    ):
        """Initialize the Claude client.

        Args:
            api_key: Claude API key. If None, uses ANTHROPIC_API_KEY env var.
            model: Model to use.
            max_tokens: Maximum tokens in response.
            max_retries: Maximum attempts per call (1 means no retry).
            base_delay: Base delay for exponential backoff.
            client: Pre-built SDK client, mainly for tests.
        """
        self.model = model
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.base_delay = base_delay

        if client is not None:
            self._client = client
        else:
            self._client = AsyncAnthropic(api_key=api_key) if api_key else AsyncAnthropic()

    async def summarize(self, entries: Sequence[LogEntry]) -> ProductivityReport:
        """Generate an aggregate report for the given sessions.

        Raises:
            CollaboratorError: If the response is not a valid report.
            APIError: If the API call fails.
        """
        prompt = format_report_prompt([entry.to_report_dict() for entry in entries])
        messages = [{"role": "user", "content": prompt}]

        response = await self._call_api_with_retry(messages, system=REPORT_SYSTEM_PROMPT)

        return self._parse_report_response(self._extract_text(response))

    async def export(self, entries: Sequence[LogEntry]) -> list[SheetRow]:
        """Normalize the given sessions into spreadsheet rows via a tool call.

        Raises:
            CollaboratorError: If no well-formed ``create_spreadsheet`` call came back.
            APIError: If the API call fails.
        """
        prompt = format_export_prompt([entry.to_export_dict() for entry in entries])
        messages = [{"role": "user", "content": prompt}]

        response = await self._call_api_with_retry(
            messages,
            system=EXPORT_SYSTEM_PROMPT,
            tools=[CREATE_SPREADSHEET_TOOL],
            tool_choice={"type": "tool", "name": CREATE_SPREADSHEET_TOOL["name"]},
        )

        return self._parse_export_response(response)

    async def _call_api_with_retry(
        self,
        messages: list[dict[str, Any]],
        system: str,
        **kwargs: Any,
    ) -> Any:
        """Call API with exponential backoff retry on rate limits."""
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    system=system,
                    messages=messages,
                    **kwargs,
                )

                logger.debug(
                    f"API call successful: {response.usage.input_tokens} in, "
                    f"{response.usage.output_tokens} out"
                )

                return response

            except RateLimitError as e:
                last_error = e
                if attempt + 1 >= self.max_retries:
                    break
                delay = self.base_delay * (2 ** attempt)
                logger.warning(f"Rate limited, retrying in {delay}s (attempt {attempt + 1})")
                await asyncio.sleep(delay)

            except APIError as e:
                last_error = e
                status_code = getattr(e, "status_code", None)
                if status_code and status_code >= 500 and attempt + 1 < self.max_retries:
                    # Server error, retry
                    delay = self.base_delay * (2 ** attempt)
                    logger.warning(f"Server error, retrying in {delay}s: {e}")
                    await asyncio.sleep(delay)
                else:
                    raise

        # All retries exhausted
        if last_error is not None:
            raise last_error
        raise CollaboratorError("Max retries exceeded")

    @staticmethod
    def _extract_text(response: Any) -> str:
        text_content = ""
        for block in response.content:
            if getattr(block, "type", None) == "text":
                text_content += block.text
        return text_content

    def _parse_report_response(self, response_text: str) -> ProductivityReport:
        """Parse Claude's response into a ProductivityReport."""
        text = response_text.strip()

        # Handle markdown code blocks
        if text.startswith("```json"):
            text = text[7:]
        elif text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        text = text.strip()

        try:
            data = json.loads(text)
            return ProductivityReport.model_validate(data)
        except (json.JSONDecodeError, pydantic.ValidationError) as e:
            logger.error(f"Failed to parse report response: {e}")
            logger.debug(f"Response text: {response_text[:500]}")
            raise CollaboratorError("Received an invalid JSON response from the AI.") from e

    def _parse_export_response(self, response: Any) -> list[SheetRow]:
        """Pull the ``create_spreadsheet`` tool input out of the response."""
        for block in response.content:
            if getattr(block, "type", None) != "tool_use":
                continue
            if block.name != CREATE_SPREADSHEET_TOOL["name"]:
                continue

            try:
                return SheetExport.model_validate(block.input).tasks
            except pydantic.ValidationError as e:
                logger.error(f"Malformed spreadsheet tool input: {e}")
                raise CollaboratorError("AI failed to generate spreadsheet data correctly.") from e

        logger.error("Response contained no create_spreadsheet tool call")
        raise CollaboratorError("AI failed to generate spreadsheet data correctly.")
