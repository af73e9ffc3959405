"""Starter .anchorguard.toml template."""

DEFAULT_TOML = """\
# anchorguard configuration
version = "1.0"

[scan]
base_ref = "origin/main"        # compared with head_ref using base...head
head_ref = "HEAD"
path_prefix = ""                # e.g. "docs/" — empty checks every path
extensions = [".md", ".mdx"]

[comment]
mode = "review"                 # review | comment
side = "RIGHT"
include_heading = true          # quote the deleted heading in the comment
# search_path = "docs"          # directory named in the comment
# marker = "Heading change detected!"

[github]
# api_url = "https://api.github.com"
# repository and token come from GITHUB_REPOSITORY / GITHUB_TOKEN

[output]
format = "terminal"             # terminal | json
show_summary = true
"""
