"""CLI module for partygen."""
