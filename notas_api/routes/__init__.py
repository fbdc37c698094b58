# Routes package init
"""
Notas API — API Routes Package
===============================

Route Inventory:
    - auth.py:       POST /login
    - resources.py:  /usuarios, /materias, /estudiantes, /notas (CRUD)
    - health.py:     GET /, GET /health

Routes stay THIN: unpack the request, call a service, return its result.
"""
