"""Exceptions raised by the transcription engine."""


class TranscriptionError(Exception):
    """Base class for all monoscribe errors."""


class InvalidConfigurationError(TranscriptionError, ValueError):
    """Configuration rejected before any processing starts."""


class InvalidInputError(TranscriptionError, ValueError):
    """Sample input the engine cannot consume (e.g. multi-channel arrays)."""


class FrameOrderError(TranscriptionError):
    """Frame estimates delivered to the onset tracker out of index order."""

    def __init__(self, expected_after: int, received: int):
        self.expected_after = expected_after
        self.received = received
        super().__init__(
            f"Frame {received} delivered after frame {expected_after}; "
            "estimates must arrive in increasing frame order"
        )
