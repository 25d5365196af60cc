"""Access control model core: models, policy rules, role links, effects, logging and IP parsing."""

__version__ = "0.1.0"

__all__ = ["assertion", "effect", "ipparser", "log", "model", "policies"]