"""CLI subcommands. Each module exposes ``register_parser`` and ``run``."""
