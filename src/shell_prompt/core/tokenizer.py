"""Prompt template tokenizer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from pydantic import ValidationError

from shell_prompt.core.color import ColorParser, is_color_word
from shell_prompt.core.components import PRIMARY_PARAM, ComponentCall, ComponentName

VARIABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
LAST_COMMAND_STATUS = "last_command_status"


class TemplateSyntaxError(ValueError):
    """Malformed prompt template.

    Attributes:
        message: What is wrong
        offset: Character offset of the offending fragment
        fragment: The offending part of the template
    """

    def __init__(self, message: str, offset: int, fragment: str) -> None:
        self.message = message
        self.offset = offset
        self.fragment = fragment
        super().__init__(f"{message}: {fragment!r} at offset {offset}")


class TokenKind(Enum):
    """Kind of a template token."""

    LITERAL = auto()
    COMPONENT = auto()
    COLOR = auto()
    RESET = auto()
    IF = auto()
    ELSE = auto()
    END = auto()


class ConditionKind(Enum):
    LAST_COMMAND_STATUS = auto()
    ENV_VAR = auto()


@dataclass(frozen=True)
class Condition:
    """Boolean test of an `{if ...}` directive."""

    kind: ConditionKind
    name: str = ""


@dataclass(frozen=True)
class Token:
    """A token from the template.

    Attributes:
        kind: Token kind
        raw: The exact template text of the token
        start: Start position in the template
        end: End position in the template (exclusive)
        text: Literal text (LITERAL)
        component: Component reference (COMPONENT)
        color: Color specification like "bold red" (COLOR)
        condition: Condition to test (IF)
    """

    kind: TokenKind
    raw: str
    start: int
    end: int
    text: str = ""
    component: ComponentCall | None = None
    color: str = ""
    condition: Condition | None = None


class Tokenizer:
    """Tokenizer for prompt templates."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)
        self._color_parser = ColorParser()

    def tokenize(self) -> list[Token]:
        """Tokenize the template and check conditional structure."""
        tokens: list[Token] = []

        while self.pos < self.length:
            if self.text[self.pos] == "{":
                tokens.append(self._parse_directive())
            else:
                tokens.append(self._parse_literal())

        self._check_conditionals(tokens)
        return tokens

    def _parse_literal(self) -> Token:
        """Parse text up to the next directive."""
        start = self.pos
        end = self.text.find("{", start)
        if end == -1:
            end = self.length
        self.pos = end
        raw = self.text[start:end]
        return Token(kind=TokenKind.LITERAL, raw=raw, start=start, end=end, text=raw)

    def _parse_directive(self) -> Token:
        """Parse a `{...}` directive."""
        start = self.pos
        close = self.text.find("}", start + 1)
        nested = self.text.find("{", start + 1)

        if nested != -1 and (close == -1 or nested < close):
            raise TemplateSyntaxError("unexpected '{' inside directive", nested, self.text[start : nested + 1])
        if close == -1:
            raise TemplateSyntaxError("unterminated directive", start, self.text[start:])

        self.pos = close + 1
        raw = self.text[start : self.pos]
        words = raw[1:-1].split()

        if not words:
            raise TemplateSyntaxError("empty directive", start, raw)

        keyword = words[0]
        args = words[1:]

        match keyword:
            case "if":
                return Token(
                    kind=TokenKind.IF,
                    raw=raw,
                    start=start,
                    end=self.pos,
                    condition=self._parse_condition(args, start, raw),
                )
            case "else" | "end" | "reset":
                if args:
                    raise TemplateSyntaxError(f"'{keyword}' takes no arguments", start, raw)
                kind = {"else": TokenKind.ELSE, "end": TokenKind.END, "reset": TokenKind.RESET}[keyword]
                return Token(kind=kind, raw=raw, start=start, end=self.pos)

        if is_color_word(keyword):
            spec = " ".join(words)
            try:
                self._color_parser.parse(spec, strict=True)
            except ValueError as e:
                raise TemplateSyntaxError(f"invalid color: {e}", start, raw) from e
            return Token(kind=TokenKind.COLOR, raw=raw, start=start, end=self.pos, color=spec.lower())

        component = self._parse_component(keyword, args, start, raw)
        return Token(kind=TokenKind.COMPONENT, raw=raw, start=start, end=self.pos, component=component)

    def _parse_condition(self, args: list[str], start: int, raw: str) -> Condition:
        """Parse the target of an `{if ...}` directive."""
        if len(args) != 1:
            raise TemplateSyntaxError("'if' takes exactly one condition", start, raw)

        target = args[0]
        if target == LAST_COMMAND_STATUS:
            return Condition(kind=ConditionKind.LAST_COMMAND_STATUS)

        if target.startswith("$") and VARIABLE_NAME.fullmatch(target[1:]):
            return Condition(kind=ConditionKind.ENV_VAR, name=target[1:])

        raise TemplateSyntaxError(f"invalid condition '{target}'", start, raw)

    def _parse_component(self, keyword: str, args: list[str], start: int, raw: str) -> ComponentCall:
        """Parse a component name and its key=value options."""
        name_text, has_shorthand, shorthand = keyword.partition("=")

        try:
            name = ComponentName(name_text)
        except ValueError:
            raise TemplateSyntaxError(f"unknown component '{name_text}'", start, raw) from None

        options: dict[str, str] = {}
        if has_shorthand:
            if name not in PRIMARY_PARAM:
                raise TemplateSyntaxError(f"'{name_text}' has no default option", start, raw)
            options[PRIMARY_PARAM[name]] = shorthand

        for arg in args:
            key, has_value, value = arg.partition("=")
            if not has_value or not key or not value:
                raise TemplateSyntaxError(f"expected key=value, got '{arg}'", start, raw)
            if key in options:
                raise TemplateSyntaxError(f"duplicate option '{key}'", start, raw)
            options[key] = value

        try:
            return ComponentCall.build(name, options)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc']) or name_text}: {error['msg']}"
                for error in e.errors()
            )
            raise TemplateSyntaxError(f"invalid options for '{name_text}' ({problems})", start, raw) from None

    def _check_conditionals(self, tokens: list[Token]) -> None:
        """Check that if/else/end directives pair up, one level deep."""
        open_if: Token | None = None
        seen_else = False

        for token in tokens:
            match token.kind:
                case TokenKind.IF:
                    if open_if is not None:
                        raise TemplateSyntaxError("nested 'if' is not supported", token.start, token.raw)
                    open_if = token
                    seen_else = False
                case TokenKind.ELSE:
                    if open_if is None:
                        raise TemplateSyntaxError("'else' without 'if'", token.start, token.raw)
                    if seen_else:
                        raise TemplateSyntaxError("duplicate 'else'", token.start, token.raw)
                    seen_else = True
                case TokenKind.END:
                    if open_if is None:
                        raise TemplateSyntaxError("'end' without 'if'", token.start, token.raw)
                    open_if = None

        if open_if is not None:
            raise TemplateSyntaxError("'if' without 'end'", open_if.start, open_if.raw)


def tokenize(text: str) -> list[Token]:
    """Tokenize a prompt template.

    Args:
        text: The template string to tokenize

    Returns:
        List of Token objects

    Raises:
        TemplateSyntaxError: The template is malformed

    Examples:
        >>> tokens = tokenize('{cwd style=short} $ ')
        >>> [t.kind.name for t in tokens]
        ['COMPONENT', 'LITERAL']
    """
    return Tokenizer(text).tokenize()


def detokenize(tokens: list[Token]) -> str:
    """Convert tokens back to a template string.

    Uses the raw representation of each token, so the original template
    is reproduced exactly.
    """
    return "".join(token.raw for token in tokens)
