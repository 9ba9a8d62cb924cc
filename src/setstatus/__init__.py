"""st: set your status across Slack, GitHub and Asana."""

__version__ = "0.1.0"
