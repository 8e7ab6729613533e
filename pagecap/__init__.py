"""pagecap — render a remote web page (or a fragment of it) to PNG."""

__version__ = "0.1.0"
