"""Pure string normalizers: URL canonicalization, classification and slugs."""
