# Middleware package init
"""
Notas API — Middleware Package
===============================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Access log + request id] → [GZip] → [CORS] → Route Handler
"""
