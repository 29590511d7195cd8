"""Progress sequencer error classes."""


class SequenceError(Exception):
    """Base exception for progress sequencer misuse."""


class SequenceInProgressError(SequenceError):
    """Raised when a sequence is started or reset while one is running."""

    def __init__(self, message: str = "A progress sequence is already running"):
        super().__init__(message)


class SequenceNotResetError(SequenceError):
    """Raised when a completed sequence is started again without a reset."""

    def __init__(self, message: str = "Progress sequence has completed; call reset() first"):
        super().__init__(message)
