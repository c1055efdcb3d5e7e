"""
insertkit - Insert statements with generated-key reconciliation.

Build a row against a ``Table`` definition, execute it through a
``Session`` on any supported DB-API driver, and read back one
``ResultRow`` per inserted row holding both the values you supplied and
the keys the database generated.
"""

__version__ = "0.1.0"

from insertkit.core import *  # noqa
