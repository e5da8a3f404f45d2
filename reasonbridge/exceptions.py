"""Exceptions raised by the ReasonBridge feedback engine."""


class ReasonBridgeError(Exception):
    """Base exception for the feedback engine."""

    pass


class NotFoundError(ReasonBridgeError):
    """Raised when a requested entity does not exist."""

    pass


class ResponseNotFoundError(NotFoundError):
    """Raised when feedback is requested for an unknown response."""

    def __init__(self, response_id: str):
        super().__init__(f"Response not found: {response_id}")
        self.response_id = response_id


class FeedbackNotFoundError(NotFoundError):
    """Raised when a feedback id does not exist."""

    def __init__(self, feedback_id: str):
        super().__init__(f"Feedback not found: {feedback_id}")
        self.feedback_id = feedback_id


class AnalysisUnavailableError(ReasonBridgeError):
    """Raised when a detector fails and no analysis result is available.

    Distinct from a result with no issues: callers should let the user
    post and render "analysis unavailable" rather than "looks good".
    """

    pass
