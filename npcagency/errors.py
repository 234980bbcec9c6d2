"""Structured error hierarchy for npcagency."""


class AgencyError(Exception):
    """Base for all npcagency errors."""

    pass


class ValidationError(AgencyError):
    """Input validation at construction time failed."""

    pass


class DecisionMismatchError(ValidationError):
    """Reasoning backend returned a decision for a different agent."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Decision belongs to agent '{actual}', expected '{expected}'")


class IllegalTransitionError(AgencyError):
    """Agent lifecycle asked to move along an edge the state machine forbids."""

    def __init__(self, agent_id: str, current: object, requested: object):
        self.agent_id = agent_id
        self.current = current
        self.requested = requested
        super().__init__(f"Agent '{agent_id}' cannot transition from {current} to {requested}")


class SensingError(AgencyError):
    """World sensor could not produce a perception."""

    pass


class ReasoningError(AgencyError):
    """Reasoning backend failed."""

    pass


class LLMError(ReasoningError):
    """LLM-specific failure."""

    pass


class LLMParseError(LLMError):
    """Failed to parse LLM response."""

    def __init__(self, raw_response: str, parse_method: str):
        self.raw_response = raw_response
        self.parse_method = parse_method
        super().__init__(f"Failed to parse LLM response via {parse_method}")


class LLMTimeoutError(LLMError):
    """LLM call timed out."""

    pass


class DialogueError(AgencyError):
    """Dialogue backend failed."""

    pass


class OperationCancelled(AgencyError):
    """A cancellation token was tripped while the operation was pending."""

    pass
