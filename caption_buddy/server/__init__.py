"""HTTP API package (FastAPI).

WHY: Companion tools reach the recording library and caption lookups
over HTTP.

HOW: models.py holds the pydantic schemas; app.py holds the routes and
create_app().
"""
