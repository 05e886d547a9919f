"""Exceptions raised by the coaching context."""


class CoachResponseError(Exception):
    """
    Raised when a model reply cannot be turned into the expected result.

    Attributes:
        task: What the coach was asked to do (e.g., "analyze")
        raw_response: The reply text that failed to parse
    """

    def __init__(self, task: str, raw_response: str, reason: str = "unparseable reply"):
        self.task = task
        self.raw_response = raw_response
        preview = raw_response.strip()[:200]
        super().__init__(f"Coach {task} failed: {reason}\nReply: {preview!r}")
