"""HTTP API exposing collector sessions (FastAPI)."""
