"""Oracle-assisted field extraction.

Asks the text-completion oracle for a title, description and priority, and
turns its answer into an ``OracleDraft``. The answer is untrusted: it is
cleaned, parsed and validated field by field. When the call fails or the
answer is unusable, a deterministic keyword-based fallback is used instead,
so this step always produces a draft.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from taskdraft.integrations.openai_client import (
    OpenAIClient,
    OracleError,
    OracleResponseError,
    OracleUnavailableError,
)
from taskdraft.models.constants import FALLBACK_TITLE, FALLBACK_TITLE_TOKENS, LOG_EXCERPT_LENGTH
from taskdraft.models.oracle import OracleDraft, coerce_confidence, coerce_text
from taskdraft.models.task import TaskPriority

logger = logging.getLogger(__name__)

# Field extraction prompt template
FIELD_PROMPT_TEMPLATE = """Detect the language of this sentence: "{text}".
Then write your entire response strictly in that same language. Do not translate.

Turn the sentence into a task. Respond with a JSON object containing:
- "title": A short, natural task title
- "description": A complete task description
- "priority": One of exactly "low", "medium", "high", "urgent"
- "priority_confidence": A number between 0.0 and 1.0 indicating your confidence in the priority
- "priority_reason": A short explanation of the priority
- "status": One of "TODO", "IN_PROGRESS", "DONE", "CANCELLED" if the sentence says so, otherwise "TODO"
- "language": The two-letter code of the detected language (e.g. "en", "fr")

Example response:
{{"title": "Buy milk", "description": "Buy milk at the store", "priority": "high", "priority_confidence": 0.8, "priority_reason": "Needed tomorrow morning", "status": "TODO", "language": "en"}}

The value of "priority" MUST be exactly one of "low", "medium", "high", "urgent".
Respond only with the JSON object, no other text, no code fences."""

_FENCE_RE = re.compile(r"```(?:json|JSON)?")

_FALLBACK_URGENT_RE = re.compile(
    r"(?<!\w)(?:urgent|urgente|urgently|asap|emergency|urgence|emergencia|immediately|"
    r"imm[ée]diatement|inmediatamente|imediatamente|right now|tout de suite|dringend|sofort)(?!\w)",
    re.I,
)
_FALLBACK_HIGH_RE = re.compile(
    r"(?<!\w)(?:important|importante|wichtig|crucial|essential|essentiel|priority|prioritaire|"
    r"prioridad|prioridade|high priority)(?!\w)",
    re.I,
)
_FALLBACK_LOW_RE = re.compile(
    r"(?<!\w)(?:when possible|whenever|eventually|someday|no rush|quand possible|si possible|"
    r"cuando puedas|cuando sea posible|quando poss[íi]vel|wenn m[öo]glich|irgendwann)(?!\w)",
    re.I,
)

# Words dropped from the fallback title: dates, urgency markers, time connectors
_TITLE_STOP_WORDS = {
    "tomorrow", "today", "tonight", "tmrw", "demain", "aujourd'hui", "aujourdhui", "ce", "soir",
    "mañana", "manana", "hoy", "amanhã", "amanha", "hoje", "morgen", "heute", "übermorgen",
    "urgent", "urgente", "urgently", "asap", "immediately", "important", "importante", "wichtig",
    "dringend", "sofort", "emergency", "urgence", "now", "maintenant", "ahora", "agora",
    "at", "à", "às", "um", "am", "next", "prochain", "prochaine",
    "morning", "afternoon", "evening", "matin", "midi",
}
_TIME_TOKEN_RE = re.compile(r"^\d{1,2}(?:[:h]\d{2})?\s*(?:am|pm|h|uhr)?$", re.I)
_DATE_TOKEN_RE = re.compile(r"^\d{1,4}(?:[/.:\-]\d{1,4})+$")
_PUNCT_RE = re.compile(r"[^\w'\-]")


def build_prompt(text: str) -> str:
    """Fill the field extraction prompt with the user's sentence."""
    return FIELD_PROMPT_TEMPLATE.format(text=text.replace('"', "'"))


def clean_oracle_response(content: str) -> str:
    """Cut the first JSON object out of a model response.

    Strips code fences, drops everything before the first '{' and after the
    last '}', then scans for the first balanced {...} span (string-aware).

    Raises:
        OracleResponseError: no '{' ... '}' span in content
    """
    cleaned = _FENCE_RE.sub("", content or "").strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise OracleResponseError("No JSON object in oracle response")
    cleaned = cleaned[start:end + 1]

    depth = 0
    in_string = False
    escaped = False
    for i, ch in enumerate(cleaned):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return cleaned[:i + 1]
    # Unbalanced: let the JSON parser decide
    return cleaned


def parse_oracle_response(content: str) -> OracleDraft:
    """Parse and validate a raw oracle answer.

    Raises:
        OracleResponseError: not JSON, not an object, or a required field is missing
    """
    try:
        data = json.loads(clean_oracle_response(content))
    except json.JSONDecodeError as e:
        raise OracleResponseError(f"Invalid JSON in oracle response at position {e.pos}") from e
    if not isinstance(data, dict):
        raise OracleResponseError("Oracle response is not a JSON object")
    return draft_from_fields(data)


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def draft_from_fields(data: Dict[str, Any]) -> OracleDraft:
    """Build an OracleDraft from a decoded JSON object, field by field."""
    title = coerce_text(data.get("title"))
    description = coerce_text(data.get("description"))
    priority = coerce_text(data.get("priority"))

    missing = [
        name for name, value in (("title", title), ("description", description), ("priority", priority))
        if value is None or (name != "description" and not value)
    ]
    if missing:
        raise OracleResponseError(f"Oracle response missing fields: {', '.join(missing)}")

    # Both status fields feed the signal; either may carry the real state
    status_parts = [coerce_text(data.get(key)) for key in ("status", "statusLabel")]

    return OracleDraft(
        title=title,
        description=description,
        raw_priority=priority,
        raw_status_signal=" ".join(part for part in status_parts if part) or None,
        confidence=coerce_confidence(_first_present(data, "priority_confidence", "priorityConfidence", "confidence")),
        reason=coerce_text(_first_present(data, "priority_reason", "priorityReason")) or None,
        language=coerce_text(data.get("language")) or None,
    )


def guess_priority(text: str) -> TaskPriority:
    """Keyword guess used when the oracle is not available."""
    if _FALLBACK_URGENT_RE.search(text or ""):
        return TaskPriority.URGENT
    if _FALLBACK_HIGH_RE.search(text or ""):
        return TaskPriority.HIGH
    if _FALLBACK_LOW_RE.search(text or ""):
        return TaskPriority.LOW
    return TaskPriority.MEDIUM


def naive_title(text: str) -> str:
    """First few meaningful words of text, capitalized."""
    words = []
    for token in (text or "").split():
        if _DATE_TOKEN_RE.match(token) or _TIME_TOKEN_RE.match(token.strip(".,;:!?")):
            continue
        word = _PUNCT_RE.sub("", token).strip("'-")
        if not word or word.lower() in _TITLE_STOP_WORDS:
            continue
        words.append(word)
        if len(words) >= FALLBACK_TITLE_TOKENS:
            break
    if not words:
        return FALLBACK_TITLE
    title = " ".join(words)
    return title[0].upper() + title[1:]


def local_fallback_draft(text: str) -> OracleDraft:
    """Deterministic draft built from the raw text alone."""
    return OracleDraft(
        title=naive_title(text),
        description=(text or "").strip(),
        raw_priority=guess_priority(text).value,
        from_fallback=True,
    )


class FieldExtractor:
    """Oracle adapter: sentence in, OracleDraft out, never raises."""

    def __init__(self, client: Optional[OpenAIClient] = None):
        self.client = client if client is not None else OpenAIClient()

    def draft(self, prompt: str) -> OracleDraft:
        """Extract title, description and priority from prompt.

        Makes a single oracle call. Any failure (missing key, network,
        timeout, auth, malformed answer) falls back to the local extractor.
        """
        if not prompt or not prompt.strip():
            logger.debug("Empty prompt. Using local fallback.")
            return local_fallback_draft(prompt)

        try:
            content = self.client.complete(build_prompt(prompt))
        except OracleUnavailableError:
            logger.debug("Oracle not configured. Using local fallback.")
            return local_fallback_draft(prompt)
        except OracleError as e:
            logger.warning(f"Oracle extraction failed ({type(e).__name__}: {e}). Using local fallback.")
            return local_fallback_draft(prompt)
        except Exception as e:
            # Don't log full error message as it might contain sensitive info
            logger.error(f"Unexpected error during oracle extraction: {type(e).__name__}. Using local fallback.")
            return local_fallback_draft(prompt)

        try:
            draft = parse_oracle_response(content)
        except OracleResponseError as e:
            excerpt = (content or "")[:LOG_EXCERPT_LENGTH]
            logger.warning(f"Malformed oracle response ({e}): {excerpt!r}. Using local fallback.")
            return local_fallback_draft(prompt)
        except Exception as e:
            logger.error(f"Unexpected error parsing oracle response: {type(e).__name__}. Using local fallback.")
            return local_fallback_draft(prompt)
        logger.debug(f"Oracle draft: title={draft.title[:50]!r} priority={draft.raw_priority!r} confidence={draft.confidence}")
        return draft
