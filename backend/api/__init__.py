"""
Reelbase API package.

FastAPI application for the Reelbase auth, session and activity backend.
The application instance lives in ``api.app``.
"""
