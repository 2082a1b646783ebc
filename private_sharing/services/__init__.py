"""Application services used by the web routes."""
