"""
Chess Stream Trivia - Errors
Conditions that stop a round from being set up. Noisy chat and
out-of-phase answers are not errors and never raise.
"""


class TriviaError(Exception):
    """Base class for round setup failures."""


class ProfileNotFound(TriviaError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Player '{username}' not found on Chess.com")


class DataFetchFailed(TriviaError):
    def __init__(self, username: str, reason: str):
        self.username = username
        self.reason = reason
        super().__init__(f"Could not fetch data for '{username}': {reason}")


class InsufficientData(TriviaError):
    def __init__(self, username: str, count: int):
        self.username = username
        self.count = count
        super().__init__(
            f"Only {count} question(s) could be built for '{username}'"
        )
