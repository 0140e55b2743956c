"""Visual route mapping of running web applications for AI coding assistants."""

__version__ = "0.1.0"
