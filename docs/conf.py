# Sphinx configuration for the hazelcast-exchange API reference.

import os
import sys

sys.path.insert(0, os.path.abspath(".."))

from hazelcast_exchange import __version__  # noqa: E402

project = "hazelcast-exchange"
author = "Hazelcast Exchange Contributors"
copyright = f"2026, {author}"
release = __version__
version = ".".join(release.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]

root_doc = "index"
exclude_patterns = ["_build"]

# The grid client is optional at docs build time.
autodoc_mock_imports = ["hazelcast"]
autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}

# Docstrings are Google style throughout.
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_include_init_with_doc = True

html_theme = "sphinx_rtd_theme"
