"""Input validation for chronos-rrule.

Cheap checks applied before the rule parser scans any input: type, length
and character set of rule text, and the type of result ceilings.
"""

import re

from .exceptions import RuleGrammarError

DEFAULT_MAX_RULE_LENGTH = 1024

# Control characters (CR/LF included: a rule is a single content value)
CONTROL_CHARACTERS = re.compile(r"[\x00-\x1F\x7F]")


class InputValidator:
    """Validation of values entering the codec and generators."""

    @classmethod
    def validate_rule_text(
        cls, text, max_length: int = DEFAULT_MAX_RULE_LENGTH
    ) -> str:
        """Validate raw rule text and return it unchanged.

        Raises:
            RuleGrammarError: if the input is not a non-empty ASCII string
                of printable characters within ``max_length``
        """
        if not isinstance(text, str):
            raise RuleGrammarError(
                repr(text), f"rule must be a string, got {type(text).__name__}"
            )
        if not text:
            raise RuleGrammarError(text, "rule cannot be empty", position=0)
        if len(text) > max_length:
            raise RuleGrammarError(
                text[:50] + "...",
                f"rule exceeds maximum length of {max_length} characters",
            )
        if not text.isascii():
            position = next(i for i, ch in enumerate(text) if not ch.isascii())
            raise RuleGrammarError(
                text, "rule must be ASCII", position=position, fragment=text[position]
            )
        match = CONTROL_CHARACTERS.search(text)
        if match:
            raise RuleGrammarError(
                text,
                "rule contains control characters",
                position=match.start(),
                fragment=repr(match.group()),
            )
        return text

    @classmethod
    def validate_limit(cls, limit) -> int:
        """Result ceilings must be integers; non-positive means "no results"."""
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise TypeError(f"limit must be an integer, got {type(limit).__name__}")
        return limit
