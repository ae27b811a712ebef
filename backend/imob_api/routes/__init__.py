# Routes package init
"""
Imob API — API Routes Package
==============================

Route Inventory:
    - auth.py:       POST   /auth/token              (credentials → bearer token)
    - customers.py:  GET    /customers               (active customers, ?role=)
                     GET    /customers/{id}
                     POST   /customers
                     PUT    /customers/{id}
                     DELETE /customers/{id}?deletionType=soft|hard
    - index.py:      GET    /                        (service banner)
                     GET    /health                  (uptime + database status)

Routes are thin: validate the body, call one repository/service method,
return the result. Failures are raised and formatted by
`imob_api.error_handlers`.
"""
