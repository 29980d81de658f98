"""
FILE: doerfy/core/__init__.py
PURPOSE: Core domain package (models, derivations, service, repository)
"""
