"""Inkwell — blog platform API.

Registration and login, user profiles, posts, categories and likes,
served over FastAPI with bearer-token authentication.
"""

__version__ = "0.1.0"
