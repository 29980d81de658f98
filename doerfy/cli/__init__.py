"""
FILE: doerfy/cli/__init__.py
PURPOSE: One-shot command line interface (typer)
"""
