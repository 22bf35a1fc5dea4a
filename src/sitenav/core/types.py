"""Core type definitions."""

from typing import NewType

# URL path of a page as delivered to the website (e.g., "/", "/products/shoes")
URLPath = NewType("URLPath", str)

# Node identifier assigned by the content repository
Uuid = NewType("Uuid", str)
