"""Errors raised by the timer, the session store and the aggregator."""


class TimeLogError(Exception):
    """Base class for every error raised by timelog."""


class InvalidStateError(TimeLogError):
    """Timer operation attempted in a state that forbids it."""


class ValidationError(TimeLogError):
    """A session handed to the store is not finalised or is inconsistent."""


class NotFoundError(TimeLogError):
    """No stored session has the requested id."""


class PersistenceError(TimeLogError):
    """The database failed to commit; nothing was changed."""
