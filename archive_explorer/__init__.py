"""Core logic for the Archive Explorer.

The Gradio UI lives in `app.py`. This package contains pure functions that:
- walk an uploaded zip archive into a folder/file tree
- search and sort that tree
- parse CSV payloads into typed rows
- search, filter, sort, paginate and export rows
"""
