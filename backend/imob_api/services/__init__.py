# Services package init
"""
Imob API — Services Layer
==========================

What:  Validation, persistence and token logic between routes and database.

Service Inventory:
    - token_service:        TokenService (issue / verify bearer tokens)
    - auth_service:         AuthService (credentials → token)
    - validation:           validate_customer_create / _update / validate_token_request
    - customer_rules:       normalize_customer_fields / customer_violations
    - customer_repository:  CustomerRepository (CRUD over customers)

Services receive their configuration and collaborators through their
constructors; `create_app()` builds one of each and stores them on
`app.state`.
"""
