"""anchorguard — flag removed Markdown headings before anchor links break."""

__version__ = "0.3.0"
