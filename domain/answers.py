"""Normalization of raw application answers into a prompt-ready text block.

Answers arrive from the job board in more than one shape::

    {"answers": [{"question": "...", "value": "..."}]}   # wrapped
    [{"question": "...", "value": "..."}]                # bare list

Anything else is treated as "no answers". The shape is resolved once here and
never leaks into the rest of the pipeline.
"""
from typing import Any, List, NamedTuple, Optional

NO_QUESTION = "(no question)"
EMPTY_ANSWER = "(empty)"


class AnswerItem(NamedTuple):
    question: str
    value: str


def _answer_list(raw: Any) -> Optional[list]:
    if isinstance(raw, dict) and isinstance(raw.get("answers"), list):
        return raw["answers"]
    if isinstance(raw, list):
        return raw
    return None


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_answers(raw: Any) -> List[AnswerItem]:
    items = _answer_list(raw)
    if items is None:
        return []

    out: List[AnswerItem] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        question = _text(item.get("question"))
        value = _text(item.get("value"))
        if not question and not value:
            continue
        out.append(AnswerItem(question, value))
    return out


def normalize_answers(raw: Any) -> str:
    blocks = [
        f"Q: {item.question or NO_QUESTION}\nA: {item.value or EMPTY_ANSWER}"
        for item in parse_answers(raw)
    ]
    return "\n\n".join(blocks)
