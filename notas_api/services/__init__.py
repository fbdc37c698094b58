# Services package init
"""
Notas API — Services Layer
===========================

Business logic between routes (HTTP) and the Store (persistence).

Service Inventory:
    - ResourceService: generic List/Get/Create/Update/Delete over one table
    - resources:       the four configured resources (usuarios, materia,
                       estudiantes, notas) and their service singletons
    - CredentialGuard: password hashing, verification and redaction
    - AuthService:     login by cedula and password

Services raise application exceptions (see exceptions.py); they never
build HTTP responses themselves.
"""
