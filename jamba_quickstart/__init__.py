"""Jamba Quickstart -- blank audio plugin generator.

Loads a versioned blank-plugin template archive once and resolves it any
number of times against user values (plugin name, company, namespace,
feature flags) into a ready-to-build ``<name>-src.zip``.
"""

__version__ = "1.3.0"
