# app/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: buyer / artist account
- Genre: genre taxonomy
- ArtObject: uploaded 3D object
- Collection, CollectionObject, CollectionRating: collections, ordered membership, ratings
- PlacedObject: AR placement of an object inside a collection
- Purchase: token purchase of a collection
"""
from .user import User
from .genre import Genre
from .art_object import ArtObject
from .collection import Collection, CollectionObject, CollectionRating
from .placed_object import PlacedObject
from .purchase import Purchase
