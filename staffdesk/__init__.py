"""staffdesk: staffing-agency back office with a tool-using chat assistant."""

__version__ = "0.1.0"
