"""
cborscope • CLI
===============

Command-line front end for the annotated CBOR decoder:

- decode : print the annotated document as JSON
- tree   : print a labelled tree with byte spans
- locate : find the deepest node covering a byte offset
- tokens : list the flat token stream

Run as ``cborscope ...`` (console script) or ``python -m cborscope.cli``.
"""

from cborscope.version import __version__

__all__ = ["__version__"]
