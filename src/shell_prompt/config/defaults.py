"""Default configuration values."""

DEFAULT_CONFIG_YAML = """
# Prompt template. Components: cwd, env, git_branch, git_commit, git_stash,
# git_status, hostname, jobs, user. Colors: {red}, {bold blue}, {reset}.
# Conditionals: {if last_command_status}...{else}...{end}, {if $VAR}...{end}
template: "{cwd} {git_branch} $ "

# Escape style for zero-width sequences: zsh, bash or plain
shell: plain

color: true

git:
  enabled: true
  timeout: 1.0
  untracked: true
"""
