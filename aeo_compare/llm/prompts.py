from typing import Dict, List

# Ask for JSON but stay tolerant of HTML or plain text answers.
SYSTEM_PROMPT = """You are an expert SEO/AEO analyst. Compare two snippets and return a clear, concise analysis.
Preferably return a JSON object with keys:
{ "result_text": "...", "result_html": "<... optional HTML ...>", "scores": {...} }
If you cannot output JSON, return a short plain-text summary. Keep result_text <= 600 words."""

USER_PROMPT_TEMPLATE = """Snippet A:
{snippet_a}

Snippet B:
{snippet_b}

Give a comparison using the requested format."""


def build_user_prompt(snippet_a: str, snippet_b: str) -> str:
    return USER_PROMPT_TEMPLATE.format(snippet_a=snippet_a, snippet_b=snippet_b)


def build_messages(snippet_a: str, snippet_b: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(snippet_a, snippet_b)},
    ]
