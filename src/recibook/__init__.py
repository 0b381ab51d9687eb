"""Recibook data service.

Repositories for recipes, the follow graph and user profiles over a
pluggable document store, plus the personalized feed and recipe image
uploads. ``recibook.factory.create_app`` wraps them in an HTTP API.
"""

__version__ = "0.1.0"
