# Routes package init
"""
TripNest Backend - API Routes Package
=======================================

Route Inventory:
    - auth.py:          POST /signup, POST /login, GET /logout,
                        GET /auth/google, GET /auth/google/secrets, GET /profile
    - items.py:         POST /add, GET /items, GET /viewDetail
    - hotels.py:        POST /addHotel, GET /hotels, GET /hotels/{id}
    - reservations.py:  POST /addRequest, GET /reservations, GET /reservations/{id}
    - health.py:        GET /health
    - payload.py:       JSON-or-form body reading shared by the handlers above

Routes stay thin: read the request, call a service, shape the response.
"""
