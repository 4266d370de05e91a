"""Tests for the aws-sso backend."""

from aws_profile_picker.backends.sso import (
    SsoBackend,
    is_session_row,
    parse_export_lines,
    parse_sso_list,
)

SSO_LIST = """\
List of AWS roles for SSO Instance: Default [Expires in: 7h 3m]

 AccountIdPad | AccountAlias | RoleName    | Profile             | Expires
==============================================================================
 111111111111 | corp-dev     | Developer   | corp-dev:Developer  |
 222222222222 | corp-prod    | ReadOnly    | corp-prod:ReadOnly  |
"""

SSO_EVAL = """\
export AWS_ACCESS_KEY_ID="ASIA123"
export AWS_SECRET_ACCESS_KEY="secret"
export AWS_SESSION_TOKEN="token"
export AWS_DEFAULT_REGION="eu-central-1"
export AWS_SSO_PROFILE="corp-dev:Developer"
unset AWS_PROFILE
"""


class TestSsoListParsing:
    def test_excludes_expires_and_rulers(self):
        assert not is_session_row("List of AWS roles [Expires in: 7h 3m]")
        assert not is_session_row("=====================")
        assert not is_session_row("   ")

    def test_pipe_delimited_row(self):
        assert parse_sso_list("x | y | z | profileB |") == ["profileB"]

    def test_parse_table(self):
        assert parse_sso_list(SSO_LIST) == ["corp-dev:Developer", "corp-prod:ReadOnly"]

    def test_short_row_skipped(self):
        assert parse_sso_list("just some text") == []


class TestExportParsing:
    def test_strips_quotes_and_ignores_other_lines(self):
        assert parse_export_lines('export FOO="bar"\necho done\n') == {"FOO": "bar"}

    def test_splits_on_first_equals(self):
        assert parse_export_lines("export TOKEN=abc==") == {"TOKEN": "abc=="}

    def test_skips_empty_value(self):
        assert parse_export_lines('export EMPTY=""\nexport NOEQ') == {}

    def test_unquoted_value(self):
        assert parse_export_lines("export REGION=us-east-1") == {"REGION": "us-east-1"}

    def test_skips_key_with_shell_syntax(self):
        output = "export X;touch /tmp/owned=1\nexport AWS_SSO_PROFILE=corp\n"
        assert parse_export_lines(output) == {"AWS_SSO_PROFILE": "corp"}

    def test_skips_key_with_nul_byte(self):
        assert parse_export_lines("export FOO\0BAR=1\nexport OK=1") == {"OK": "1"}

    def test_skips_key_starting_with_digit(self):
        assert parse_export_lines("export 1FOO=1") == {}

    def test_skips_value_with_nul_byte(self):
        assert parse_export_lines("export FOO=a\0b") == {}


class TestSsoBackend:
    def test_list_active_sessions(self, runner, env):
        runner.run.return_value = SSO_LIST
        backend = SsoBackend(runner)

        assert backend.list_active_sessions([], env) == ["corp-dev:Developer", "corp-prod:ReadOnly"]
        assert runner.run.call_args.args[:2] == ("aws-sso", [])

    def test_list_failure_yields_no_sessions(self, failing_runner, env):
        assert SsoBackend(failing_runner).list_active_sessions([], env) == []

    def test_activate_applies_exports(self, runner, env):
        runner.run.return_value = SSO_EVAL
        backend = SsoBackend(runner)

        assert backend.activate("corp-dev:Developer", env) is True
        assert env.get("AWS_ACCESS_KEY_ID") == "ASIA123"
        assert env.get("AWS_SSO_PROFILE") == "corp-dev:Developer"
        assert env.get("AWS_REGION") == "eu-central-1"
        assert runner.run.call_args.args[:2] == ("aws-sso", ["eval", "-p", "corp-dev:Developer"])
        assert runner.run.call_args.kwargs["shell"] is True

    def test_activate_without_exports(self, runner, env):
        runner.run.return_value = "error: not logged in\n"
        assert SsoBackend(runner).activate("corp-dev:Developer", env) is False
        assert env.changes == {}

    def test_activate_ignores_invalid_export_names(self, runner, env):
        runner.run.return_value = (
            'export AWS_SSO_PROFILE="corp-dev:Developer"\n'
            "export X;touch /tmp/owned=1\n"
        )
        assert SsoBackend(runner).activate("corp-dev:Developer", env) is True
        assert set(env.changes) == {"AWS_SSO_PROFILE"}
        assert "touch" not in env.to_shell()
