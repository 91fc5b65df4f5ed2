from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI

from ..config import LlmSettings
from ..core.availability import render_availability
from ..domain import CalendarStatus, ContextPayload, CopilotRequest

logger = logging.getLogger(__name__)

_BASE_INSTRUCTIONS = (
    "You are a sales copilot helping a seller during a live WhatsApp conversation. "
    "Ground every suggestion in the context sections below and never invent data that is not present."
)

_PROFILE_LABELS = (
    ("name", "Name"),
    ("description", "Description"),
    ("products_services", "Products/Services"),
    ("product_function", "Function"),
    ("differentiators", "Differentiators"),
    ("competitors", "Competitors"),
    ("metrics", "Metrics"),
    ("common_mistakes", "Common mistakes to avoid"),
    ("desired_perception", "Desired perception"),
)

_HISTORY_LIMIT = 10
_KNOWLEDGE_CHARS = 300
_EXAMPLE_CHARS = 500


def _example_text(example: Dict[str, Any]) -> str:
    return str(example.get("transcricao") or example.get("content") or "")


def render_context_sections(payload: ContextPayload) -> str:
    """Render the context payload into the plain-text sections appended to the system prompt."""

    sections: List[str] = []

    profile = payload.business_profile
    if profile is not None:
        lines = [f"BUSINESS TYPE: {profile.business_type.value}", "SELLER COMPANY:"]
        record = profile.to_dict()
        for key, label in _PROFILE_LABELS:
            if record.get(key):
                lines.append(f"- {label}: {record[key]}")
        sections.append("\n".join(lines))

    if payload.knowledge_docs:
        lines = ["COMPANY KNOWLEDGE:"]
        for doc in payload.knowledge_docs:
            content = str(doc.get("content") or "")[:_KNOWLEDGE_CHARS]
            lines.append(f"- {doc.get('category', 'general')}: {content}")
        sections.append("\n".join(lines))

    for title, examples in (
        ("APPROACHES THAT WORKED (imitate these patterns):", payload.success_examples),
        ("APPROACHES THAT DID NOT WORK (avoid these patterns):", payload.failure_examples),
    ):
        if not examples:
            continue
        lines = [title]
        for index, example in enumerate(examples, start=1):
            score = example.get("nota_original") or "N/A"
            lines.append(f"Example {index} (score {score}):\n{_example_text(example)[:_EXAMPLE_CHARS]}")
        sections.append("\n\n".join(lines))

    if payload.calendar_status is CalendarStatus.UNAVAILABLE:
        sections.append("SELLER CALENDAR: not available.")
    elif payload.availability is not None:
        heading = f"SELLER AVAILABILITY (next {len(payload.availability)} days):"
        sections.append(heading + "\n" + render_availability(payload.availability))

    return "\n\n".join(sections)


class OpenAIResponder:
    def __init__(self, settings: LlmSettings, client: Optional[OpenAI] = None) -> None:
        self.settings = settings
        self._client = client

    def _ensure_client(self) -> OpenAI:
        if self._client is None:
            if not self.settings.is_configured:
                missing = ", ".join(self.settings.missing_env_vars)
                raise RuntimeError(f"OpenAI is not configured. Missing: {missing}")
            self._client = OpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                organization=self.settings.organization,
            )
        return self._client

    def build_messages(self, payload: ContextPayload, request: CopilotRequest) -> List[Dict[str, str]]:
        system_prompt = _BASE_INSTRUCTIONS
        context = render_context_sections(payload)
        if context:
            system_prompt += "\n\n" + context
        if request.conversation_context:
            contact = request.contact_name or request.contact_phone or "contact"
            system_prompt += f"\n\nCURRENT CONVERSATION (with {contact}):\n{request.conversation_context}"

        messages = [{"role": "system", "content": system_prompt}]
        for entry in request.history[-_HISTORY_LIMIT:]:
            role = "user" if entry.role == "user" else "assistant"
            messages.append({"role": role, "content": entry.content})
        messages.append({"role": "user", "content": request.message})
        return messages

    def respond(self, payload: ContextPayload, request: CopilotRequest) -> str:
        client = self._ensure_client()
        completion = client.chat.completions.create(
            model=self.settings.chat_model,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            messages=self.build_messages(payload, request),
        )
        content = completion.choices[0].message.content or ""
        logger.debug("Responder produced %d characters", len(content))
        return content
