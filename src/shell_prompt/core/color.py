"""ANSI color parsing and shell-safe escape sequences."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Standard ANSI color names
COLORS = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
}

# Aliases for bright black
GRAYS = ("gray", "grey")

# Text attributes
ATTRIBUTES = {
    "bold": 1,
    "dim": 2,
    "italic": 3,
    "underline": 4,
    "blink": 5,
    "reverse": 7,
    "inverse": 7,
    "hidden": 8,
    "strikethrough": 9,
}

RESET = "\033[0m"
UNDERLINE_ON = "\033[4m"
UNDERLINE_OFF = "\033[24m"


class Shell(Enum):
    """Shell the prompt is rendered for."""

    ZSH = "zsh"
    BASH = "bash"
    PLAIN = "plain"


def wrap_escape(sequence: str, shell: Shell) -> str:
    """Mark an escape sequence as zero-width for the given shell.

    Without the markers the shell counts escape bytes toward the prompt
    width and line editing goes wrong.
    """
    if not sequence:
        return ""
    match shell:
        case Shell.ZSH:
            return f"%{{{sequence}%}}"
        case Shell.BASH:
            return f"\\[{sequence}\\]"
        case _:
            return sequence


def is_color_word(word: str) -> bool:
    """Check if a word can start a color specification."""
    word = word.lower()
    return word in COLORS or word in ATTRIBUTES or word in GRAYS or word == "bright"


@dataclass
class ParsedColor:
    """Parsed color specification.

    Attributes:
        fg: Foreground color name ("red", "bright red") or None
        bg: Background color name or None
        bold: Bold attribute
        dim: Dim attribute
        italic: Italic attribute
        underline: Underline attribute
        blink: Blink attribute
        reverse: Reverse/inverse attribute
        hidden: Hidden attribute
        strikethrough: Strikethrough attribute
    """

    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    dim: bool = False
    italic: bool = False
    underline: bool = False
    blink: bool = False
    reverse: bool = False
    hidden: bool = False
    strikethrough: bool = False

    def to_ansi(self) -> str:
        """Convert to ANSI escape sequence.

        The sequence starts with a reset so a color never inherits
        attributes from whatever was active before it.
        """
        codes: list[int] = [0]

        for name in ("bold", "dim", "italic", "underline", "blink", "reverse", "hidden", "strikethrough"):
            if getattr(self, name):
                codes.append(ATTRIBUTES[name])

        if self.fg is not None:
            codes.append(self._color_to_code(self.fg, foreground=True))

        if self.bg is not None:
            codes.append(self._color_to_code(self.bg, foreground=False))

        return f"\033[{';'.join(str(c) for c in codes)}m"

    def _color_to_code(self, color: str, foreground: bool) -> int:
        """Convert color name to ANSI code."""
        base = 30 if foreground else 40
        bright_base = 90 if foreground else 100

        if color in GRAYS:
            return bright_base + COLORS["black"]

        if color.startswith("bright "):
            return bright_base + COLORS[color[7:]]

        return base + COLORS[color]


class ColorParser:
    """Parser for color specification strings."""

    def parse(self, color_spec: str, strict: bool = True) -> ParsedColor:
        """Parse a color specification string.

        Args:
            color_spec: Color string like "bold red on white"
            strict: Raise ValueError on words that are not colors or attributes

        Returns:
            ParsedColor object

        Examples:
            >>> parser = ColorParser()
            >>> color = parser.parse("bold red on white")
            >>> color.fg
            'red'
            >>> color.bg
            'white'
            >>> color.bold
            True
        """
        result = ParsedColor()
        parts = color_spec.lower().split()

        i = 0
        while i < len(parts):
            part = parts[i]

            if part in ATTRIBUTES:
                setattr(result, part if part != "inverse" else "reverse", True)
                i += 1
                continue

            # "on" switches to the background color
            if part == "on":
                color, i = self._parse_color_name(parts, i + 1)
                if color is None:
                    if strict:
                        raise ValueError(f"expected a color after 'on' in '{color_spec}'")
                    continue
                result.bg = color
                continue

            color, next_i = self._parse_color_name(parts, i)
            if color is not None:
                if result.fg is None:
                    result.fg = color
                i = next_i
                continue

            if strict:
                raise ValueError(f"unknown color or attribute '{part}'")
            i += 1

        return result

    def _parse_color_name(self, parts: list[str], i: int) -> tuple[str | None, int]:
        """Read a color name starting at parts[i], return it and the next index."""
        if i >= len(parts):
            return None, i

        part = parts[i]
        if part in COLORS or part in GRAYS:
            return part, i + 1

        if part == "bright" and i + 1 < len(parts) and parts[i + 1] in COLORS:
            return f"bright {parts[i + 1]}", i + 2

        return None, i


def parse_color(color_spec: str) -> ParsedColor:
    """Parse a color specification string.

    Args:
        color_spec: Color string like "bold red on white"

    Returns:
        ParsedColor object
    """
    return ColorParser().parse(color_spec)
