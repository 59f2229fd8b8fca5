"""
wbschema - map tabular columns onto Wikibase item schemas.

The package is split into a mapping model (terms, statements, qualifiers and
references built from column mappings), a drag-and-drop compatibility
validator, and a constraint validation service that checks values against
the property constraints declared on a Wikibase instance.
"""

__version__ = "0.1.0"
