"""
Boundary layer for external system integrations.

Handles all interactions with the external card databases.
"""
