"""Global pytest fixtures for CALGRID."""

pytest_plugins = [
    "tests.fixtures.datagen",
]
