"""
Tupplur - schema-driven document store over an ordered key-value backend.
"""
__version__ = "0.1.0"
