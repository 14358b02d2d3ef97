"""Command line interface for prlint."""
