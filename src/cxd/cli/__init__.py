"""cxd command-line interface."""
