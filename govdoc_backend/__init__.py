"""
GovDoc Backend - plain-language breakdowns of Korean administrative documents
"""
__version__ = "1.0.0"
