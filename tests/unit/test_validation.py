"""
Unit tests for input validation
"""

import pytest

from chronos_rrule.exceptions import RuleGrammarError
from chronos_rrule.validation import DEFAULT_MAX_RULE_LENGTH, InputValidator


class TestValidateRuleText:
    def test_valid(self):
        """Test valid text is returned unchanged"""
        assert InputValidator.validate_rule_text("FREQ=DAILY") == "FREQ=DAILY"

    def test_not_a_string(self):
        """Test non-string input"""
        with pytest.raises(RuleGrammarError, match="must be a string"):
            InputValidator.validate_rule_text(b"FREQ=DAILY")

    def test_empty(self):
        """Test empty input"""
        with pytest.raises(RuleGrammarError, match="cannot be empty"):
            InputValidator.validate_rule_text("")

    def test_too_long(self):
        """Test input beyond the maximum length"""
        text = "FREQ=DAILY;BYHOUR=" + "1," * DEFAULT_MAX_RULE_LENGTH
        with pytest.raises(RuleGrammarError, match="maximum length"):
            InputValidator.validate_rule_text(text)

    def test_non_ascii(self):
        """Test non-ASCII input reports the offending position"""
        with pytest.raises(RuleGrammarError) as exc_info:
            InputValidator.validate_rule_text("FREQ=DÄILY")
        assert exc_info.value.position == 6

    @pytest.mark.parametrize("text", ["FREQ=DAILY\r\n", "FREQ=\x00DAILY", "FREQ=DAILY\x7f"])
    def test_control_characters(self, text):
        """Test control characters are rejected"""
        with pytest.raises(RuleGrammarError, match="control characters"):
            InputValidator.validate_rule_text(text)


class TestValidateLimit:
    @pytest.mark.parametrize("limit", [0, -5, 366])
    def test_integers(self, limit):
        """Test integers pass through"""
        assert InputValidator.validate_limit(limit) == limit

    @pytest.mark.parametrize("limit", [1.0, "10", None, False])
    def test_non_integers(self, limit):
        """Test other types are rejected"""
        with pytest.raises(TypeError):
            InputValidator.validate_limit(limit)
