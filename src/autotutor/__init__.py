"""autotutor: turn a GitHub repository into an AI-written tutorial."""

__version__ = "0.1.0"
