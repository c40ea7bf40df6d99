"""Tests for speaker-level discovery and batch migration."""

from conftest import TALK_URL, FakeStorage, make_fetcher, talk_page
from talk_migration.discovery.speaker import BatchDiscoverer, BatchReport
from talk_migration.models.results import MigrationResult
from talk_migration.pipeline import MigrationOrchestrator

INDEX_URL = "https://speaking.jbaru.ch/"
OTHER_TALK = "https://speaking.jbaru.ch/AbC123/another-talk"
BROKEN_TALK = "https://speaking.jbaru.ch/Zz9876/broken-talk"

INDEX_HTML = f"""
<html><body>
  <a href="/">Home</a>
  <a href="/PjlHKD/robocoders-judgment-day">Robocoders</a>
  <a href="/PjlHKD/robocoders-judgment-day#video">Robocoders (video)</a>
  <a href="https://speaking.jbaru.ch/AbC123/another-talk/">Another talk</a>
  <a href="/videos/some-recording">Videos</a>
  <a href="/about">About</a>
  <a href="/speaking">Speaking</a>
  <a href="/Zz9876/broken-talk">Broken</a>
  <a href="https://noti.st/someone/Qq1234/elsewhere">Elsewhere</a>
  <a href="/PjlHKD/robocoders-judgment-day/slides/extra">Deep link</a>
</body></html>
"""


def orchestrator(settings, routes):
    return MigrationOrchestrator(settings, fetcher=make_fetcher(routes), storage=FakeStorage())


class TestDiscover:
    """Tests for talk URL discovery."""

    def test_harvests_talk_links(self, settings):
        discoverer = BatchDiscoverer(orchestrator(settings, {INDEX_URL: INDEX_HTML}))
        assert discoverer.discover(INDEX_URL) == [TALK_URL, OTHER_TALK + "/", BROKEN_TALK]

    def test_harvests_noti_st_handle_links(self, settings):
        index = "https://noti.st/jbaruch"
        html = """
        <html><body>
          <a href="/jbaruch">Profile</a>
          <a href="/jbaruch/PjlHKD/robocoders-judgment-day">Robocoders</a>
          <a href="https://noti.st/jbaruch/AbC123/another-talk">Another talk</a>
          <a href="/jbaruch/videos/">Videos</a>
        </body></html>
        """
        discoverer = BatchDiscoverer(orchestrator(settings, {index: html}))
        assert discoverer.discover(index) == [
            "https://noti.st/jbaruch/PjlHKD/robocoders-judgment-day",
            "https://noti.st/jbaruch/AbC123/another-talk",
        ]

    def test_skips_already_migrated(self, settings):
        orch = orchestrator(settings, {INDEX_URL: INDEX_HTML, TALK_URL: talk_page(og_image=None)})
        assert orch.migrate(TALK_URL).ok

        report = BatchReport()
        pending = BatchDiscoverer(orch).discover(INDEX_URL, report)
        assert TALK_URL not in pending
        assert report.skipped == [TALK_URL]
        assert len(report.discovered) == 3


class TestMigrateAll:
    """Tests for the batch ledger."""

    def test_continues_past_failures(self, settings):
        routes = {
            INDEX_URL: INDEX_HTML,
            TALK_URL: talk_page(og_image=None),
            OTHER_TALK + "/": talk_page(title="Another Talk", og_image=None),
        }
        report = BatchDiscoverer(orchestrator(settings, routes)).migrate_all(INDEX_URL)

        assert report.succeeded == [TALK_URL, OTHER_TALK + "/"]
        assert list(report.failed) == [BROKEN_TALK]
        assert "HTTP 404" in report.failed[BROKEN_TALK][0]
        assert not report.ok
        assert len(list(settings.talks_path.glob("*.md"))) == 2

    def test_unexpected_exception_is_recorded(self, settings):
        class ExplodingOrchestrator(MigrationOrchestrator):
            def migrate(self, url, skip_tests=False):
                if url == BROKEN_TALK:
                    raise RuntimeError("boom")
                return MigrationResult(url=url, ok=True)

        orch = ExplodingOrchestrator(settings, fetcher=make_fetcher({INDEX_URL: INDEX_HTML}), storage=FakeStorage())
        report = BatchDiscoverer(orch).migrate_all(INDEX_URL)

        assert report.failed == {BROKEN_TALK: ["exception:RuntimeError: boom"]}
        assert len(report.succeeded) == 2

    def test_per_talk_tests_skipped_and_run_once(self, settings):
        calls = []

        class RecordingOrchestrator(MigrationOrchestrator):
            def migrate(self, url, skip_tests=False):
                calls.append(skip_tests)
                return MigrationResult(url=url, ok=True)

        settings = settings.model_copy(update={"test_command": "definitely-not-a-real-command-4821"})
        orch = RecordingOrchestrator(settings, fetcher=make_fetcher({INDEX_URL: INDEX_HTML}), storage=FakeStorage())
        report = BatchDiscoverer(orch).migrate_all(INDEX_URL)

        assert calls == [True, True, True]
        assert len(report.warnings) == 1

    def test_skip_tests_for_batch(self, settings):
        settings = settings.model_copy(update={"test_command": "definitely-not-a-real-command-4821"})
        orch = orchestrator(settings, {INDEX_URL: INDEX_HTML, TALK_URL: talk_page(og_image=None)})
        report = BatchDiscoverer(orch).migrate_all(INDEX_URL, skip_tests=True)
        assert report.warnings == []

    def test_pause_between_talks(self, settings, monkeypatch):
        sleeps = []
        monkeypatch.setattr("talk_migration.discovery.speaker.time.sleep", sleeps.append)
        orch = orchestrator(settings, {INDEX_URL: INDEX_HTML})
        BatchDiscoverer(orch, pause=1.0).migrate_all(INDEX_URL, skip_tests=True)
        assert sleeps == [1.0, 1.0]
