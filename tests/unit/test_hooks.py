"""Tests for the downstream build and test hooks."""

import subprocess

from talk_migration.hooks import run_command, run_migration_tests, run_site_build


class TestHooks:
    """Tests for best-effort hook commands."""

    def test_unconfigured_hook_is_noop(self, settings):
        assert run_site_build(settings) is None
        assert run_migration_tests(settings) is None

    def test_success(self, settings, monkeypatch):
        seen = {}

        def fake_run(args, **kwargs):
            seen["args"] = args
            seen["cwd"] = kwargs["cwd"]
            return subprocess.CompletedProcess(args, 0, stdout="ok", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        assert run_command("bundle exec rake test:migration", settings, "Migration tests") is None
        assert seen["args"] == ["bundle", "exec", "rake", "test:migration"]
        assert seen["cwd"] == settings.site_root

    def test_non_zero_exit(self, settings, monkeypatch):
        monkeypatch.setattr(
            subprocess, "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 2, stdout="", stderr="1 failure\nDetails"),
        )
        warning = run_command("rake test", settings, "Migration tests")
        assert "exit code 2" in warning
        assert "Details" in warning

    def test_timeout(self, settings, monkeypatch):
        def fake_run(args, **kwargs):
            raise subprocess.TimeoutExpired(args, kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", fake_run)
        assert "timed out" in run_command("jekyll build", settings, "Site build")

    def test_missing_executable(self, settings):
        warning = run_command("definitely-not-a-real-command-4821", settings, "Site build")
        assert "could not start" in warning
