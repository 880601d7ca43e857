"""docvault: owner-scoped document storage behind an external identity provider."""

__version__ = "0.1.0"
