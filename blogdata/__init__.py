"""
Blog content data-access layer.

Subpackages:
    core: exceptions, logging, paths, validators
    database: ORM models, fetch plans, repositories, CLI
"""

__version__ = "1.0.0"
