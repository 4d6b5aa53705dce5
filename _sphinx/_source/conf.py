# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#project-information
from datetime import datetime
import tomllib
import os
import sys # Path manipulation

# Read information from pyproject.toml
with open("../../pyproject.toml", "rb") as _f:
    _config = tomllib.load(_f)
__project = _config['project']
__year = datetime.now().year
project = __project['name']
release = __project['version']
license = __project['license']['text']
author = ', '.join([d['name'] for d in __project['authors']])
copyright = f"{__year}, {author}"

sys.path.insert(0, os.path.abspath('../..')) # The project root, so autodoc can import adcppype.

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.viewcode',
    'myst_parser', # Markdown support
]

autodoc_member_order = 'bysource'

templates_path = ['_templates']
exclude_patterns = []

source_suffix = [
    '.rst',
    '.md',
]

# -- Options for HTML output -------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#options-for-html-output

html_theme = 'sphinx_rtd_theme'
html_static_path = ['_static']
