"""Speaker-level discovery and batch migration."""

from talk_migration.discovery.speaker import BatchDiscoverer, BatchReport, print_batch_report

__all__ = ["BatchDiscoverer", "BatchReport", "print_batch_report"]
