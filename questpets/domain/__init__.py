"""Domain layer (pure logic).

- Keep task completion and rotation rules here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI.
- Time and randomness are passed in as arguments.
"""
