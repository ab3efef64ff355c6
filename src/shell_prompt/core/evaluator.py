"""Template evaluation: conditionals and color-group squashing."""

from __future__ import annotations

from dataclasses import dataclass, field

from shell_prompt.core.color import RESET, Shell, parse_color, wrap_escape
from shell_prompt.core.components import resolve
from shell_prompt.core.environment import Environment
from shell_prompt.core.tokenizer import Condition, ConditionKind, Token, TokenKind, tokenize


@dataclass(frozen=True)
class RenderOptions:
    """Output settings passed down to every resolver.

    Attributes:
        shell: Shell whose zero-width markers wrap escape sequences
        color: Emit color escapes at all
    """

    shell: Shell = Shell.PLAIN
    color: bool = True


@dataclass
class _Group:
    """An open color group collecting its rendered contents."""

    color: str
    parts: list[str] = field(default_factory=list)


def evaluate_condition(condition: Condition, env: Environment) -> bool:
    """Evaluate an `{if ...}` condition against the snapshot."""
    match condition.kind:
        case ConditionKind.LAST_COMMAND_STATUS:
            return env.last_exit_status == 0
        case ConditionKind.ENV_VAR:
            return env.getenv(condition.name) != ""
        case _:
            raise ValueError(f"Unknown condition: {condition.kind}")


class Evaluator:
    """Render a token sequence against an Environment snapshot."""

    def __init__(self, env: Environment, options: RenderOptions | None = None) -> None:
        self.env = env
        self.options = options or RenderOptions()

    def render(self, tokens: list[Token]) -> str:
        """Render tokens into the final prompt string.

        Tokens in a branch that is not taken are skipped without being
        resolved. A color group whose contents render empty is dropped
        together with its escape sequences.
        """
        output: list[str] = []
        groups: list[_Group] = []
        skipping = False
        branch_taken = False

        for token in tokens:
            match token.kind:
                case TokenKind.IF:
                    if token.condition is None:
                        raise ValueError(f"if without condition at offset {token.start}")
                    branch_taken = evaluate_condition(token.condition, self.env)
                    skipping = not branch_taken
                    continue
                case TokenKind.ELSE:
                    skipping = branch_taken
                    continue
                case TokenKind.END:
                    skipping = False
                    continue

            if skipping:
                continue

            buffer = groups[-1].parts if groups else output

            match token.kind:
                case TokenKind.LITERAL:
                    buffer.append(token.text)
                case TokenKind.COMPONENT:
                    if token.component is None:
                        raise ValueError(f"component token without component at offset {token.start}")
                    buffer.append(resolve(token.component, self.env, self.options))
                case TokenKind.COLOR:
                    groups.append(_Group(color=token.color))
                case TokenKind.RESET:
                    if groups:
                        self._close_group(groups, output)

        while groups:
            self._close_group(groups, output)

        return "".join(output)

    def _close_group(self, groups: list[_Group], output: list[str]) -> None:
        """Pop the innermost group and emit it into its parent unless empty."""
        group = groups.pop()
        contents = "".join(group.parts)
        if contents == "":
            return

        parent = groups[-1] if groups else None
        buffer = parent.parts if parent else output

        if not self.options.color:
            buffer.append(contents)
            return

        buffer.append(self._escape(parse_color(group.color).to_ansi()))
        buffer.append(contents)
        buffer.append(self._escape(RESET))
        if parent is not None:
            # the reset also cleared the parent's color
            buffer.append(self._escape(parse_color(parent.color).to_ansi()))

    def _escape(self, sequence: str) -> str:
        return wrap_escape(sequence, self.options.shell)


def render(tokens: list[Token], env: Environment, options: RenderOptions | None = None) -> str:
    """Render a token sequence.

    Args:
        tokens: Tokens from tokenize()
        env: Environment snapshot
        options: Output settings

    Returns:
        The prompt string
    """
    return Evaluator(env, options).render(tokens)


def render_template(template: str, env: Environment, options: RenderOptions | None = None) -> str:
    """Tokenize and render a template in one step.

    Raises:
        TemplateSyntaxError: The template is malformed
    """
    return render(tokenize(template), env, options)
