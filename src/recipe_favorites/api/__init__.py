"""API module for the favorites service.

API layer:
- Validates inputs, reads/writes DB through the repository
- Returns JSON payloads for the mobile and web clients
- Forbidden: outbound HTTP calls (those belong to the keepalive worker)
"""
