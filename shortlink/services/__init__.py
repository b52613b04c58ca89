"""
Services module for business logic separation.

This module contains the code generator and the link store, keeping them
separate from API endpoints and database models.
"""
