"""HTTP API for compiling and running programs.

WHY: Editors, playgrounds and other tools want to run programs without
spawning a process per request. A small HTTP service exposes the same
compile-and-run operation the CLI uses.

HOW: app.py defines the FastAPI application and routes, models.py the
pydantic request/response schemas.

RULES:
- Every request builds its own Engine; nothing is shared between runs
- Every run has a step limit so a request always terminates
"""
