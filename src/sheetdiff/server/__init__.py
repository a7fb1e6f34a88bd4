"""HTTP service for sheetdiff."""
