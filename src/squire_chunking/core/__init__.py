"""
Core modules for the Squire chunking engine.

This package contains the document processing logic; configuration and
logging helpers live in squire_chunking.utils.
"""
