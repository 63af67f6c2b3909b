"""The ``calgrid`` command line."""
