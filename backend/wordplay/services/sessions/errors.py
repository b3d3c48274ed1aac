"""Errors raised by the session engine.

Wrong answers are not errors: rules report them as rejected verdicts and the
round simply continues. Stale timer firings are not errors either; the engine
drops them before they touch anything.
"""


class SessionError(Exception):
    """Base class for session failures surfaced to callers."""


class SessionAlreadyActive(SessionError):
    def __init__(self, channel_id):
        super().__init__(f"a session is already running in channel {channel_id}")
        self.channel_id = channel_id


class SessionNotFound(SessionError):
    def __init__(self, channel_id):
        super().__init__(f"no session in channel {channel_id}")
        self.channel_id = channel_id


class UnknownGame(SessionError):
    def __init__(self, game):
        super().__init__(f"unknown game: {game}")
        self.game = game


class InvalidTransition(SessionError):
    """A phase change that the state machine never allows."""


class ConfigurationError(SessionError):
    """A session cannot run with the current configuration (e.g. empty corpus)."""
