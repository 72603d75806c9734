"""
API Routes Package

This package contains FastAPI route handlers for the application.
Each module defines routes for a specific feature area:

- auth.py: Account routes (signup, signin)
- uploads.py: Presigned image upload URLs
- blogs.py: Post authoring and discovery (latest, trending, search)

Routes are registered in main.py using FastAPI's router system.
"""
