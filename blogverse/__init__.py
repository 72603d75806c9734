"""
Blogverse Application Package

This package contains the API for the Blogverse publishing platform.
The package is organized as follows:

- config.py: Application configuration and environment settings
- database.py: Database engine and per-request session management
- dependencies.py: FastAPI dependency injection functions
- errors.py: Service error types and the HTTP status each maps to
- limiter.py: Rate limiting configuration
- main.py: FastAPI application entry point
- models.py: SQLAlchemy ORM database models
- repositories.py: Account and post storage used by the services

Subpackages:
- routes/: API route handlers (auth, uploads, blogs)
- services/: Business logic (tokens, identity, uploads, authoring, feed)
- utils/: Utility functions (slugs and tags, validators)
"""
