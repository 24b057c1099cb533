"""
RSVP Question Validator

Validates free-form RSVP answers against an event's declared question list.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from src.domain.base import slugify
from src.domain.entities import Event
from src.domain.errors import RsvpSubmissionError

QUESTION_TYPES = ("text", "textarea", "select", "number")

_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_TRUTHY = {"1", "true", "on", "yes"}


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value or "").strip().lower() in _TRUTHY


class QuestionValidator:
    """
    Checks required answers and per-type constraints for each declared
    question, resolving answers posted under legacy keys.

    Canonical key: explicit ``key``, else slugified label, else ``q_<n>``
    (1-based). Lookups also accept the raw label and both ``q_<index>`` and
    ``q_<index+1>`` for older clients.
    """

    def validate_for_event(
        self, event: Event, responses: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        responses = responses if isinstance(responses, dict) else {}
        questions = event.questions if isinstance(event.questions, list) else []
        return self.validate(questions, responses)

    def validate(
        self, questions: List[Any], responses: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Returns:
            The original answers plus any answer found under a fallback key,
            copied to its canonical key (existing keys are never overwritten)

        Raises:
            RsvpSubmissionError: 422 naming the offending question's label
        """
        normalized = dict(responses)

        for index, question in enumerate(questions):
            if not isinstance(question, dict):
                continue

            label = str(question.get("label") or f"Question {index + 1}").strip()
            question_type = self._normalize_type(question.get("type"))
            key = self.resolve_key(question, index)

            has_value, value = self._extract(
                responses, self._candidate_keys(question, index, key)
            )
            answered = has_value and not _is_empty(value)

            if _to_bool(question.get("required", False)) and not answered:
                raise RsvpSubmissionError(
                    "INVALID_ANSWER", f"The question '{label}' is required.", 422
                )

            if not answered:
                continue

            options = question.get("options")
            self._validate_type(
                label, question_type, value, options if isinstance(options, list) else []
            )

            if key not in normalized:
                normalized[key] = value

        return normalized

    @staticmethod
    def resolve_key(question: Dict[str, Any], index: int) -> str:
        key = str(question.get("key") or "").strip()
        if key:
            return key

        slug = slugify(str(question.get("label") or "").strip(), separator="_")
        if slug:
            return slug

        return f"q_{index + 1}"

    @staticmethod
    def _normalize_type(raw_type: Any) -> str:
        question_type = str(raw_type or "").strip().lower()
        return question_type if question_type in QUESTION_TYPES else "text"

    @staticmethod
    def _candidate_keys(question: Dict[str, Any], index: int, resolved_key: str) -> List[str]:
        candidates = [
            resolved_key,
            str(question.get("key") or "").strip(),
            str(question.get("label") or "").strip(),
            f"q_{index}",
            f"q_{index + 1}",
        ]
        seen: List[str] = []
        for candidate in candidates:
            if candidate and candidate not in seen:
                seen.append(candidate)
        return seen

    @staticmethod
    def _extract(responses: Dict[str, Any], keys: List[str]) -> Tuple[bool, Any]:
        for key in keys:
            if key in responses:
                return True, responses[key]
        return False, None

    @staticmethod
    def _validate_type(label: str, question_type: str, value: Any, options: List[Any]) -> None:
        if question_type == "number":
            if isinstance(value, bool):
                raise RsvpSubmissionError(
                    "INVALID_ANSWER", f"The answer to '{label}' must be a number.", 422
                )
            if isinstance(value, (int, float)):
                return
            if isinstance(value, str) and _NUMERIC.match(value.strip().replace(",", ".")):
                return
            raise RsvpSubmissionError(
                "INVALID_ANSWER", f"The answer to '{label}' must be a number.", 422
            )

        if question_type in ("text", "textarea"):
            if not _is_scalar(value):
                raise RsvpSubmissionError(
                    "INVALID_ANSWER", f"The answer to '{label}' must be text.", 422
                )
            return

        # select
        if not _is_scalar(value):
            raise RsvpSubmissionError(
                "INVALID_ANSWER", f"The answer to '{label}' is invalid.", 422
            )

        allowed = [
            str(option).strip()
            for option in options
            if _is_scalar(option) and str(option).strip() != ""
        ]
        if not allowed:
            return

        answer = str(value).strip().casefold()
        if not any(option.casefold() == answer for option in allowed):
            raise RsvpSubmissionError(
                "INVALID_ANSWER", f"Invalid answer for the question '{label}'.", 422
            )
