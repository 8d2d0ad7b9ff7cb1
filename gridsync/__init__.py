"""
Backend package for the manga grid app.

This package provides a small FastAPI service that verifies Google sign-in
tokens, stores users' 3x3 cover grids and proxies cover images so the
browser canvas can export them.
"""
