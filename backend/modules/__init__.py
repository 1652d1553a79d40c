"""
Feature modules for the Tavern admin backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- service.py: Business logic implementation
- exceptions.py: Module-specific exceptions

The admin module also owns routes.py with its FastAPI route handlers.
Modules communicate through interfaces, not concrete implementations.
"""
