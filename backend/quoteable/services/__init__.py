"""
So Quoteable Backend — Services Layer
======================================

What:  Business rules between the routes (HTTP) and the database.
How:   Each service is a stateless class with a module-level singleton.
       Methods receive the request's AsyncSession and raise QuoteableError
       subclasses that main.py maps to HTTP responses.

Service Inventory:
    - PersonService:     people CRUD, slug lookup
    - QuoteService:      quotes CRUD, filter by person
    - ImageService:      base image and generated card records, expiry window
    - CloudinaryService: uploads with retry and a circuit breaker
    - QuoteCardService:  builds quote card URLs from the transformation compiler
"""
