"""openmw-config command line interface.

cli.py : Inspect a chain (`chain`, `show`, `get`, `dump`, `check`)
"""
