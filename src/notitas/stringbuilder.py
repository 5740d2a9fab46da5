"""StringBuilder for footnote markup accumulation.

Appends fragments to a list and joins once at the end, avoiding repeated
string concatenation while the rewriter and list renderer assemble output.

Thread Safety:
StringBuilder instances are local to each render call.

"""

from __future__ import annotations


class StringBuilder:
    """Efficient string accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append('<li id="a-note">').append("Body").append("</li>")
            >>> sb.build()
            '<li id="a-note">Body</li>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a fragment (empty strings are skipped).

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        return self

    def append_line(self, s: str = "") -> StringBuilder:
        """Append a fragment followed by a newline."""
        if s:
            self._parts.append(s)
        self._parts.append("\n")
        return self

    def build(self) -> str:
        """Join all fragments into the final string."""
        return "".join(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)
