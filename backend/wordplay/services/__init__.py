"""Domain services: sessions, game rules and word sources.

Kept free of Flask request handling; routes and socket handlers call into
these modules through the engine stored on the app.
"""
