"""
member_service test package

Covers the backend logic of the member service:

- FastAPI application and routers (`main.py`, `routes/`)
- Store gateway and its reconnect loop (`gateway.py`, `connection.py`)
- Password hashing and bearer tokens (`auth.py`)
"""
