"""Error kinds raised by the QuestTimer core.

All of them are local and recoverable: the caller (controller or window)
decides whether to surface them.  Each one also subclasses the closest
builtin so plain ``except ValueError`` handlers keep working.
"""


class QuestError(Exception):
    """Base class for every rejected quest/timer operation."""


class InvalidTransition(QuestError, RuntimeError):
    """Illegal state-machine move, e.g. starting a completed session."""


class InvalidDuration(QuestError, ValueError):
    """A non-positive duration was supplied."""


class EmptyInput(QuestError, ValueError):
    """Blank dragon description or treasure name."""


class NotFound(QuestError, LookupError):
    """Operation referenced an unknown treasure id."""


class InvalidState(QuestError, RuntimeError):
    """Mutating a completed task, or completing with nothing active."""
