"""
So Quoteable Backend — API Routes Package
==========================================

Route Inventory:
    - people.py:          /api/people, /api/people/{id}, /api/people/by-slug/{slug}
    - quotes.py:          /api/quotes, /api/quotes/{id}
    - images.py:          /api/images, /api/people/{id}/images, /api/images/upload,
                          /api/generated-images, /api/quotes/{id}/generated-images
    - transformations.py: POST /api/transformations/url, POST /api/quote-cards
    - health.py:          GET /health

Routes stay thin: parse the request, call a service, shape the response.
"""
