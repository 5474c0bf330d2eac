"""
Pydantic schema definitions for API payloads.

Request and response bodies are kept separate from the rows returned
by the query layer so that the API representation does not leak
storage details such as the password hash.
"""
