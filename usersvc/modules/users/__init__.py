"""
User Module

CRUD over the users collection, split by concern:
- domain: User model and repository result type
- repositories: Data access
- api: REST API endpoints
"""
