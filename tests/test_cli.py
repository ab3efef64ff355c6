"""Tests for the command-line interface."""

import pytest

from shell_prompt import cli
from shell_prompt.core.environment import Environment


@pytest.fixture
def fixed_env(monkeypatch, env):
    """Make collect_environment return the fixture snapshot."""
    captured = {}

    def fake_collect(*, last_exit_status, jobs, git_settings):
        captured.update(last_exit_status=last_exit_status, jobs=jobs, git_settings=git_settings)
        return Environment(
            cwd=env.cwd,
            home=env.home,
            hostname=env.hostname,
            user=env.user,
            variables=env.variables,
            jobs=jobs,
            last_exit_status=last_exit_status,
        )

    monkeypatch.setattr(cli, "collect_environment", fake_collect)
    return captured


@pytest.fixture
def no_config(tmp_path):
    return ["--config", str(tmp_path / "none.yaml"), "--config-dir", str(tmp_path / "none.d")]


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        parsed = cli.parse_args([])

        assert parsed.status == 0
        assert parsed.jobs == 0
        assert parsed.shell is None
        assert parsed.template is None

    def test_empty_jobs(self):
        assert cli.parse_args(["--jobs", ""]).jobs == 0
        assert cli.parse_args(["--jobs", "__empty__"]).jobs == 0
        assert cli.parse_args(["-j", "3"]).jobs == 3

    def test_invalid_jobs(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["--jobs", "many"])


class TestMain:
    """Tests for main()."""

    def test_renders_template(self, fixed_env, no_config, capsys):
        code = cli.main([*no_config, "{cwd=short} $ "])

        assert code == 0
        assert capsys.readouterr().out == "~/D/g/t/prompt $ "

    def test_status_and_jobs(self, fixed_env, no_config, capsys):
        code = cli.main([*no_config, "-s", "1", "-j", "2", "{if last_command_status}ok{else}fail{end} {jobs}"])

        assert code == 0
        assert capsys.readouterr().out == "fail 2"
        assert fixed_env["last_exit_status"] == 1

    def test_shell_option(self, fixed_env, no_config, capsys):
        cli.main([*no_config, "--shell", "zsh", "{red}{user}{reset}"])

        assert capsys.readouterr().out == "%{\033[0;31m%}alice%{\033[0m%}"

    def test_no_color(self, fixed_env, no_config, capsys):
        cli.main([*no_config, "--no-color", "{red}{user}{reset}"])

        assert capsys.readouterr().out == "alice"

    def test_no_git(self, fixed_env, no_config, capsys):
        cli.main([*no_config, "--no-git", "{user}"])

        assert fixed_env["git_settings"].enabled is False

    def test_template_from_config(self, fixed_env, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("template: '{user}> '\nshell: bash\n")

        code = cli.main(["--config", str(config), "--config-dir", str(tmp_path / "none.d")])

        assert code == 0
        assert capsys.readouterr().out == "alice> "

    def test_syntax_error(self, fixed_env, no_config, capsys):
        code = cli.main([*no_config, "{cwd"])

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ""
        assert captured.err.startswith("error: unterminated directive")
        assert fixed_env == {}

    def test_check_only(self, fixed_env, no_config, capsys):
        code = cli.main([*no_config, "--check", "{user}"])

        assert code == 0
        assert capsys.readouterr().out == ""
        assert fixed_env == {}

    def test_bad_config(self, fixed_env, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("shell: fish\n")

        code = cli.main(["--config", str(config), "--config-dir", str(tmp_path / "none.d"), "{user}"])

        assert code == 1
        assert "error: loading configuration" in capsys.readouterr().err

    def test_print_default_config(self, fixed_env, capsys):
        code = cli.main(["--print-default-config"])

        assert code == 0
        assert capsys.readouterr().out.startswith("# Prompt template.")
        assert fixed_env == {}

    def test_deleted_working_directory(self, no_config, tmp_path, monkeypatch, capsys):
        """Test the prompt still renders after the current directory is removed."""
        gone = tmp_path / "gone"
        gone.mkdir()
        monkeypatch.chdir(gone)
        gone.rmdir()
        monkeypatch.setenv("PWD", str(gone))

        code = cli.main([*no_config, "--no-git", "{cwd=long} $ "])

        assert code == 0
        assert capsys.readouterr().out == f"{gone} $ "

    def test_non_utf8_directory(self, monkeypatch, env, no_config, capsysbinary):
        """Test undecodable path bytes are written back out unchanged."""
        cwd = env.home / "caf\udce9"

        def fake_collect(*, last_exit_status, jobs, git_settings):
            return Environment(cwd=cwd, home=env.home, user=env.user)

        monkeypatch.setattr(cli, "collect_environment", fake_collect)

        code = cli.main([*no_config, "{cwd} $ "])

        assert code == 0
        assert capsysbinary.readouterr().out == b"~/caf\xe9 $ "
