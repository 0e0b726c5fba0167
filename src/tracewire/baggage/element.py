# (c) Copyright IBM Corp. 2025

from typing import FrozenSet, Iterable, Optional

# Token separators, which may not appear in a baggage key.
EXCLUDED_KEY_CHARS = frozenset('()<>@,;:\\"/[]?={}')
# Characters that may not appear unescaped in a baggage value.
EXCLUDED_VALUE_CHARS = frozenset('",;\\')


class Element(object):
    """
    Scans one key or value of a baggage list member, one character at a time.

    Leading and trailing whitespace is dropped.  Whitespace inside the token,
    control characters, non ASCII characters and the excluded characters make
    the element invalid, which the parser reads as "skip this list member".
    """

    def __init__(self, excluded: Iterable[str]) -> None:
        self.excluded: FrozenSet[str] = frozenset(excluded)
        self.reset(0)

    @classmethod
    def create_key_element(cls) -> "Element":
        return cls(EXCLUDED_KEY_CHARS)

    @classmethod
    def create_value_element(cls) -> "Element":
        return cls(EXCLUDED_VALUE_CHARS)

    def reset(self, start: int) -> None:
        self.start = start
        self.end = start
        self.leading_space = True
        self.reading_value = False
        self.trailing_space = False
        self.value: Optional[str] = None

    def try_terminating(self, index: int, source: str) -> bool:
        """
        Ends the element at index.

        :return: True when a non-empty token was read, its text is then in value
        """
        if self.reading_value:
            self._mark_end(index)
        if self.trailing_space:
            self.value = source[self.start:self.end]
            return True
        return False

    def try_next_char(self, char: str, index: int) -> bool:
        """
        Feeds one character to the element.

        :return: False when the character makes the element invalid
        """
        if self._is_whitespace(char):
            return self._try_next_whitespace(index)
        elif self._is_excluded(char):
            return False
        else:
            return self._try_next_token_char(index)

    def _mark_start(self, start: int) -> None:
        self.start = start
        self.leading_space = False
        self.reading_value = True

    def _mark_end(self, end: int) -> None:
        self.end = end
        self.reading_value = False
        self.trailing_space = True

    def _try_next_token_char(self, index: int) -> bool:
        if self.leading_space:
            self._mark_start(index)
        # A token may not resume once trailing whitespace was seen.
        return not self.trailing_space

    def _try_next_whitespace(self, index: int) -> bool:
        if self.reading_value:
            self._mark_end(index)
        return True

    def _is_excluded(self, char: str) -> bool:
        code = ord(char)
        return code <= 32 or code >= 127 or char in self.excluded

    @staticmethod
    def _is_whitespace(char: str) -> bool:
        return char == " " or char == "\t"
