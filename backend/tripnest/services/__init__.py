# Services package init
"""
TripNest Backend - Services Layer
===================================

Business rules between the routes (HTTP) and the database (persistence).
Each service is a class with a module-level singleton instance.

Service Inventory:
    - UserService:        signup, local login, Google find-or-create, session lookup
    - GoogleOAuthClient:  authorization URL and code-for-profile exchange (httpx)
    - ItemService:        items, with hotel references checked before insert
    - HotelService:       hotels
    - ReservationService: reservation requests for the session user
    - FileService:        image validation, storage and cleanup
"""
