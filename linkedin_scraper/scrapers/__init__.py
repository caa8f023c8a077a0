"""Browser-facing pieces: selectors, extractors, session and page control."""
