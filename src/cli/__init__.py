"""Command-line entry points for stream drills."""
