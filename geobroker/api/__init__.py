"""
API Module
---------
Provides the HTTP surfaces of the broker using FastAPI.
Features include:
- The loopback intake endpoint that resolves coordinates into address records
- Holding a request open while the operator confirms or rejects the result
- A control API for the desktop UI (latest record, configuration, decisions)
"""
