"""shaderdocs - catalog-driven documentation for the shader collection.

Renders gallery pages, README and credits from the shader catalog.
"""

__version__ = "1.0.0"
