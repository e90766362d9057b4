"""
accessdb
--------
Community accessibility database for games, hardware, places, software
and services.

Subpackages:
    core        Paths, exceptions, logging, validation
    database    Models, managers, migrations and CLI
    utils       Slug generation
"""

__version__ = "1.0.0"
