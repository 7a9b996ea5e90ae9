"""Helper modules for Budget Game.

- catalog_helpers: Read-through TTL cache for the activity catalog
- settings_helpers: voluptuous validation of streak settings and bonus rules
"""
