#!/usr/bin/env python3
"""Render the shader documentation.

Usage:
    python scripts/render_docs.py [<catalog.json> [<template> <output> ...]]

    # Example:
    python scripts/render_docs.py config/shader-catalog.json \
        docs/template/README.md docs/README.md \
        docs/template/gallery.md docs/gallery.md

Without arguments, the catalog path comes from SHADERDOCS_CATALOG_PATH and
the documents from config/package-config.json.
"""

import sys

from shaderdocs.cli import main

if __name__ == "__main__":
    sys.exit(main())
