"""CLI commands for tlog, grouped by feature."""
