"""
Server core: settings, constants, database session wiring and request security.
"""
