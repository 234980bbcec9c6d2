"""Tests for the npcagency error hierarchy."""

import pytest

from npcagency.errors import (
    AgencyError,
    DecisionMismatchError,
    DialogueError,
    IllegalTransitionError,
    LLMError,
    LLMParseError,
    LLMTimeoutError,
    OperationCancelled,
    ReasoningError,
    SensingError,
    ValidationError,
)


def test_agency_error_hierarchy():
    """All custom errors inherit from AgencyError."""
    assert issubclass(ValidationError, AgencyError)
    assert issubclass(DecisionMismatchError, ValidationError)
    assert issubclass(IllegalTransitionError, AgencyError)
    assert issubclass(SensingError, AgencyError)
    assert issubclass(ReasoningError, AgencyError)
    assert issubclass(LLMError, ReasoningError)
    assert issubclass(LLMParseError, LLMError)
    assert issubclass(LLMTimeoutError, LLMError)
    assert issubclass(DialogueError, AgencyError)
    assert issubclass(OperationCancelled, AgencyError)
    assert issubclass(AgencyError, Exception)


def test_llm_parse_error_attributes():
    """LLMParseError stores response and method."""
    error = LLMParseError("THOUGHT: hmm", "line format")

    assert error.raw_response == "THOUGHT: hmm"
    assert error.parse_method == "line format"
    assert "Failed to parse LLM response" in str(error)
    assert "line format" in str(error)


def test_illegal_transition_error_attributes():
    error = IllegalTransitionError("lord_1", "idle", "acting")

    assert error.agent_id == "lord_1"
    assert error.current == "idle"
    assert error.requested == "acting"
    assert "lord_1" in str(error)


def test_decision_mismatch_error_message():
    error = DecisionMismatchError(expected="a", actual="b")

    assert error.expected == "a"
    assert error.actual == "b"
    assert "expected 'a'" in str(error)


def test_operation_cancelled_can_be_caught_as_agency_error():
    with pytest.raises(AgencyError):
        raise OperationCancelled("stop")
