"""
credential_service tests

Covers the backend of the credential service:

- FastAPI application end to end (`main.py`, `routes/users.py`)
- Token issuing, verification and the bearer gate (`auth.py`)
- Registration/login flows and the SQLAlchemy credential store
  (`flows.py`, `store.py`, `db.py`)
"""
