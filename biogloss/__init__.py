"""
BioGloss - glossary annotation for scientific documents
"""

__version__ = "1.0.0"
