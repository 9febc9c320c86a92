"""
Request controllers for the accounts service.

:mod:`.auth_flow` holds the account operations themselves. The other modules
adapt them to HTTP: they take form data from a request and return a
``(data, status code, headers)`` tuple for the routes to render.
"""
