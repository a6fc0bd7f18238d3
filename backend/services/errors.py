"""Error taxonomy shared by the synthesis core and the HTTP routes."""


class ZeroBuildError(Exception):
    """Base class for domain errors."""


class ValidationError(ZeroBuildError):
    """Draft or request is missing required input; nothing was dispatched."""


class GatewayError(ZeroBuildError):
    """A generation service call failed."""

    def __init__(self, message: str, operation: str = ""):
        super().__init__(message)
        self.operation = operation


class SynthesisCancelled(ZeroBuildError):
    """The caller cancelled a synthesis before it was stored."""


class DuplicateSynthesisError(ZeroBuildError):
    """An identical synthesis for the same requester is already running."""


class AuthenticationError(ZeroBuildError):
    """Credentials or session token were rejected."""
