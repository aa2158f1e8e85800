"""
Docs and blog CMS. Bodies are stored as Markdown source and served as JSON;
rendering happens client-side.
"""
