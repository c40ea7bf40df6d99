"""Best-effort downstream hooks: rebuild the site, run its migration tests.

A hook never fails a migration. Each returns a warning message, or None when
the command succeeded or is not configured.
"""

import shlex
import subprocess
from typing import Optional

from rich.console import Console

from talk_migration.config import MigrationSettings

console = Console()


def run_command(command: str, settings: MigrationSettings, label: str) -> Optional[str]:
    """Run ``command`` in the site root."""
    if not command.strip():
        return None

    console.print(f"[cyan]{label}:[/cyan] {command}")
    try:
        result = subprocess.run(
            shlex.split(command),
            cwd=settings.site_root,
            capture_output=True,
            text=True,
            timeout=settings.hook_timeout,
        )
    except subprocess.TimeoutExpired:
        return f"{label} timed out after {settings.hook_timeout:.0f}s: {command}"
    except OSError as e:
        return f"{label} could not start ({command}): {e}"

    if result.returncode != 0:
        tail = (result.stderr or result.stdout or "").strip().splitlines()[-5:]
        detail = " | ".join(tail) if tail else "no output"
        return f"{label} failed with exit code {result.returncode}: {detail}"

    console.print(f"[green]{label} passed[/green]")
    return None


def run_site_build(settings: MigrationSettings) -> Optional[str]:
    return run_command(settings.build_command, settings, "Site build")


def run_migration_tests(settings: MigrationSettings) -> Optional[str]:
    return run_command(settings.test_command, settings, "Migration tests")
