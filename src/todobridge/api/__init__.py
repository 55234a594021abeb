"""API layer: canonical typed surface for transport layers (HTTP, CLI).

Key rules:

1. No datastore access - only call record_repo functions
2. Accept and return the pydantic models from todos.todo_models
3. Raise todobridge.exceptions errors; transports map them with http_status_for
"""
