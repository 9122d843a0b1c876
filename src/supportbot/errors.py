"""Exception types shared across the store, resolver and HTTP layer."""


class SupportBotError(Exception):
    """Base class for application errors."""


class ValidationError(SupportBotError):
    """Request is missing a session id or message. Raised before any storage access."""


class StorageError(SupportBotError):
    """A conversation store read or write failed."""


class GenerationError(SupportBotError):
    """The external generation capability returned something unusable.

    Never escapes the resolver: it is converted into the fixed
    technical-difficulties reply.
    """
