"""
Schemas module - Request/Response schemas for API endpoints.

Difference from services:
- Services: Internal data handling on MongoDB documents
- Schemas: API contract (what client sends/receives)
"""
