"""Errors raised by the data access layer."""


class RecordNotFoundError(LookupError):
    """Requested row does not exist (or belongs to another employer)."""


class RuleNotFoundError(RecordNotFoundError):
    pass


class ConcurrentUpdateError(RuntimeError):
    """A compare-and-set write found the row changed since it was read."""


class StaleCandidateError(ConcurrentUpdateError):
    pass
