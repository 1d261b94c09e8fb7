"""
Normalization of free-form model output.

The model is asked for JSON but may answer with a JSON object wrapped in
prose or code fences, with raw HTML, or with plain text. ``parse_reply``
classifies the reply into one of three variants and ``normalize`` turns the
variant into the text/HTML pair returned to API callers.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

DEFAULT_MAX_CHARS = 40000
ELLIPSIS = "..."

TEXT_FIELDS = ("result_text", "result", "analysis", "summary")
HTML_FIELDS = ("result_html", "html")

_FENCE_RE = re.compile(r"```json|```", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_HTML_RE = re.compile(r"</?[a-z][\s\S]*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RUN_RE = re.compile(r"\s{2,}")


@dataclass(frozen=True)
class StructuredPayload:
    text: str
    html: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HtmlText:
    html: str


@dataclass(frozen=True)
class PlainText:
    text: str
    # HTML carried by a JSON object that had no text field
    html: Optional[str] = None


ParsedReply = Union[StructuredPayload, HtmlText, PlainText]


@dataclass(frozen=True)
class NormalizedResult:
    result_text: str
    result_html: Optional[str] = None


def _load_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Pull a JSON object out of text that may carry fences, prose or both."""
    if not text:
        return None
    cleaned = _FENCE_RE.sub("", text)
    start = cleaned.find("{")
    if start >= 0:
        cleaned = cleaned[start:]
    parsed = _load_object(cleaned)
    if parsed is not None:
        return parsed
    match = _OBJECT_RE.search(cleaned)
    if match:
        return _load_object(match.group(0))
    return None


def _first_string(data: Dict[str, Any], keys) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def looks_like_html(text: str) -> bool:
    return bool(text) and _HTML_RE.search(text) is not None


def strip_html_tags(text: str) -> str:
    if not text:
        return ""
    return _SPACE_RUN_RE.sub(" ", _TAG_RE.sub("", text)).strip()


def parse_reply(raw_text: Optional[str]) -> ParsedReply:
    """Classify a model reply. Never raises."""
    raw_text = raw_text or ""
    data = extract_json_object(raw_text)
    html = None
    if data is not None:
        text = _first_string(data, TEXT_FIELDS)
        html = _first_string(data, HTML_FIELDS)
        if text is not None:
            return StructuredPayload(text=text, html=html, data=data)
    if looks_like_html(raw_text):
        return HtmlText(html=raw_text)
    return PlainText(text=raw_text, html=html)


def truncate(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + ELLIPSIS
    return text


def normalize(raw_text: Optional[str], max_chars: int = DEFAULT_MAX_CHARS) -> NormalizedResult:
    reply = parse_reply(raw_text)
    if isinstance(reply, StructuredPayload):
        text, html = reply.text, reply.html
    elif isinstance(reply, HtmlText):
        text, html = strip_html_tags(reply.html), reply.html
    else:
        text, html = reply.text, reply.html
    return NormalizedResult(result_text=truncate(text, max_chars), result_html=html)
