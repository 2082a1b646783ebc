"""Web layer for FastAPI routes and request handling.

Routes reach the data-sharing client, the loaded credentials and the session
registry through the dependencies in ``private_sharing.web.dependencies``.
"""
