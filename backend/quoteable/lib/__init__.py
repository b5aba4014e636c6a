# lib package init
"""
So Quoteable Backend — Pure Helpers
====================================

What:  Side-effect-free building blocks shared by services and scripts.

Inventory:
    - transformations.py: Cloudinary transformation directives + URL builder
    - debounce.py:        Last-write-wins call coalescing with cancel/flush
    - slug.py:            URL-friendly slugs from names and email addresses

Nothing in here performs I/O or imports from services/routes.
"""
