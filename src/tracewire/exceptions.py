# (c) Copyright IBM Corp. 2025


class InvalidEncodingError(ValueError):
    """Raised when a hex or percent encoded field holds a character that is
    not a valid radix-16 digit.

    The offending character and its position in the source text are kept on
    the exception so callers can report them.
    """

    def __init__(self, char: str, index: int) -> None:
        self.char = char
        self.index = index
        super().__init__(f"Invalid character {char!r} at index {index}")


class OutOfRangeError(IndexError):
    """Raised when the input ends before a fixed-width field is complete."""

    pass


class InvalidArgumentError(ValueError):
    """Raised for structurally malformed input: a traceparent or tracestate
    header with the wrong shape, or a broken percent escape.
    """

    pass


class UnsupportedOperationError(NotImplementedError):
    """Raised when a measurement of the wrong numeric type is recorded into a
    type-specific aggregator. This signals an instrument wiring bug.
    """

    pass
