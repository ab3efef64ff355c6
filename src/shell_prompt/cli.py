"""Command-line interface for the prompt renderer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from shell_prompt.config.defaults import DEFAULT_CONFIG_YAML
from shell_prompt.config.loader import load_config
from shell_prompt.core.color import Shell
from shell_prompt.core.environment import collect_environment
from shell_prompt.core.evaluator import RenderOptions, render
from shell_prompt.core.tokenizer import TemplateSyntaxError, tokenize

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging on stderr so it never mixes with the prompt.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def write_prompt(text: str) -> None:
    """Write the prompt to stdout.

    Paths and variables can hold bytes that are not valid UTF-8; they arrive
    as surrogate escapes and are written back out as the original bytes.
    """
    sys.stdout.flush()
    sys.stdout.buffer.write(text.encode("utf-8", errors="surrogateescape"))
    sys.stdout.buffer.flush()


def job_count(value: str) -> int:
    """Parse --jobs; shells pass an empty string when there are none."""
    if value in ("", "__empty__"):
        return 0
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid job count: {value!r}") from None
    if count < 0:
        raise argparse.ArgumentTypeError(f"invalid job count: {value!r}")
    return count


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="prompt",
        description="Render a shell prompt from a template",
        epilog="Example: prompt --shell zsh --status $? '{cyan}{cwd=short}{reset} $ '",
    )

    parser.add_argument(
        "--status",
        "-s",
        type=int,
        default=0,
        metavar="CODE",
        help="Exit status of the previous command (default: 0)",
    )

    parser.add_argument(
        "--jobs",
        "-j",
        type=job_count,
        default=0,
        metavar="N",
        help="Number of background jobs (default: 0)",
    )

    parser.add_argument(
        "--shell",
        choices=[shell.value for shell in Shell],
        help="Wrap escape sequences for this shell (default: from config, else plain)",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        metavar="FILE",
        help="Configuration file path (default: ~/.config/prompt/config.yaml)",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        metavar="DIR",
        help="Drop-in configuration directory (default: ~/.config/prompt/conf.d/)",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colors",
    )

    parser.add_argument(
        "--no-git",
        action="store_true",
        help="Skip repository inspection",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate the template",
    )

    parser.add_argument(
        "--print-default-config",
        action="store_true",
        help="Print the default configuration file and exit",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug information to stderr",
    )

    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version="%(prog)s 0.1.0",
    )

    parser.add_argument(
        "template",
        nargs="?",
        help="Prompt template (default: from config)",
    )

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments

    Returns:
        Exit code
    """
    parsed = parse_args(args)
    setup_logging(parsed.verbose)

    if parsed.print_default_config:
        sys.stdout.write(DEFAULT_CONFIG_YAML.lstrip())
        return 0

    try:
        config = load_config(
            config_path=parsed.config,
            dropin_dir=parsed.config_dir,
        )
    except (ValidationError, ValueError, OSError) as e:
        print(f"error: loading configuration: {e}", file=sys.stderr)
        return 1

    template = parsed.template if parsed.template is not None else config.template

    # The whole template is compiled before anything is rendered
    try:
        tokens = tokenize(template)
    except TemplateSyntaxError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if parsed.check:
        return 0

    git_settings = config.git
    if parsed.no_git:
        git_settings = git_settings.model_copy(update={"enabled": False})

    options = RenderOptions(
        shell=Shell(parsed.shell or config.shell),
        color=config.color and not parsed.no_color,
    )

    env = collect_environment(
        last_exit_status=parsed.status,
        jobs=parsed.jobs,
        git_settings=git_settings,
    )
    logger.debug("Rendering %d tokens", len(tokens))

    write_prompt(render(tokens, env, options))
    return 0


if __name__ == "__main__":
    sys.exit(main())
