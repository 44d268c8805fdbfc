"""Sphinx configuration for the contact book documentation."""

import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.abspath(".."))

project = "Contact Book"
current_year = datetime.now().year
copyright = f"{current_year}, Contact Book"
author = "Contact Book Team"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]


templates_path = ["_templates"]
exclude_patterns: list[str] = []

html_theme = "alabaster"

autodoc_member_order = "bysource"
