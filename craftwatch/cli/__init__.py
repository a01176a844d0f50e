"""craftwatch command-line interface."""
