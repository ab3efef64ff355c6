"""Core functionality: tokenizer, components, evaluator, and color engine."""

from shell_prompt.core.color import ColorParser, Shell, parse_color
from shell_prompt.core.components import ComponentCall, ComponentName, CwdStyle, resolve
from shell_prompt.core.environment import Environment, collect_environment
from shell_prompt.core.evaluator import RenderOptions, render, render_template
from shell_prompt.core.models import EnvironmentQueryFailure, GitState
from shell_prompt.core.tokenizer import TemplateSyntaxError, Token, TokenKind, detokenize, tokenize

__all__ = [
    "ColorParser",
    "ComponentCall",
    "ComponentName",
    "CwdStyle",
    "Environment",
    "EnvironmentQueryFailure",
    "GitState",
    "RenderOptions",
    "Shell",
    "TemplateSyntaxError",
    "Token",
    "TokenKind",
    "collect_environment",
    "detokenize",
    "parse_color",
    "render",
    "render_template",
    "resolve",
    "tokenize",
]
