"""
Todo Cookie API package.

A FastAPI service exposing todo CRUD routes guarded by a signed session
cookie, plus register/login/logout. The ASGI app lives in todo_api.main.
"""

__version__ = "0.1.0"
