"""
Server modules for the Bible Map application.

This package contains the FastAPI router modules for each entity, the
unified search, service metadata and the shared error handling.
"""
