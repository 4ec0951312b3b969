"""Recruitment email drafting backed by the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from succession_leads.core.config import ConfigError, Settings
from succession_leads.core.models import EmailDraft

logger = logging.getLogger(__name__)

MODEL_NAME = "gpt-4o-mini"

SYSTEM_MSG = (
    "You write recruitment and business development emails for financial advisory firms. "
    "Your goal is to persuade experienced financial advisers to join your client's firm. "
    'Always respond with valid JSON containing "subject" and "body" fields.'
)


class EmailGenerationError(RuntimeError):
    """Raised when the language model call or its response parsing fails."""


def build_prompt(
    company_name: str,
    company_number: Optional[str] = None,
    director_name: Optional[str] = None,
    director_age: Optional[Any] = None,
    address: Optional[str] = None,
    custom_instructions: Optional[str] = None,
) -> str:
    lines = [
        "Write a personalised, professional email persuading this company's director "
        "to join our client's financial advisory firm.",
        "",
        f"Company Name: {company_name}",
        f"Company Number: {company_number or 'N/A'}",
        f"Director Name: {director_name or 'Not specified'}",
        f"Director Age: {director_age or 'N/A'}",
        f"Address: {address or 'N/A'}",
    ]
    if custom_instructions:
        lines += ["", f"Additional Instructions: {custom_instructions}"]
    lines += [
        "",
        "Keep it courteous and concise (150-250 words), speak to succession planning, "
        "and end with a clear call to arrange a conversation.",
        'Reply with JSON only: {"subject": "...", "body": "..."}',
    ]
    return "\n".join(lines)


def _parse_content(text: str) -> dict:
    text = (text or "").strip()
    # tolerate fenced JSON
    if text.startswith("```"):
        text = text.strip("`")
        if text[:4].lower() == "json":
            text = text[4:].strip()
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("model response is not a JSON object")
    return data


class EmailDraftGenerator:
    def __init__(self, api_key: str = "", model: str = MODEL_NAME, client: Optional[Any] = None) -> None:
        if client is None:
            if not api_key:
                raise ConfigError("Email generation service is not configured. Please contact support.")
            client = OpenAI(api_key=api_key)
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailDraftGenerator":
        return cls(api_key=settings.openai_api_key, model=settings.openai_model)

    def generate(
        self,
        company_name: str,
        company_number: Optional[str] = None,
        director_name: Optional[str] = None,
        director_age: Optional[Any] = None,
        address: Optional[str] = None,
        custom_instructions: Optional[str] = None,
    ) -> EmailDraft:
        if not company_name:
            raise ValueError("Company name is required")

        prompt = build_prompt(
            company_name,
            company_number=company_number,
            director_name=director_name,
            director_age=director_age,
            address=address,
            custom_instructions=custom_instructions,
        )
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_MSG},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=600,
                response_format={"type": "json_object"},
            )
            data = _parse_content(completion.choices[0].message.content)
        except (OpenAIError, ValueError, IndexError, AttributeError) as exc:
            logger.error("Email generation failed for %s: %s", company_name, exc)
            raise EmailGenerationError(str(exc)) from exc

        usage = getattr(completion, "usage", None)
        tokens_used = int(getattr(usage, "total_tokens", 0) or 0)
        logger.info("Generated email for %s (tokens=%d)", company_name, tokens_used)
        return EmailDraft(
            subject=str(data.get("subject", "")).strip(),
            body=str(data.get("body", "")).strip(),
            tokens_used=tokens_used,
        )
