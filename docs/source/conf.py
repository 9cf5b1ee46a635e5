import os
import sys
import sphinx_rtd_theme

sys.path.insert(0, os.path.abspath('../../src'))

# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------

project = 'tcpchat'
author = 'tcpchat contributors'
release = '0.1.0'

# -- General configuration ---------------------------------------------------
html_theme = "sphinx_rtd_theme"

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',  # Google-style docstrings
    'sphinx.ext.viewcode'
]

# PyQt5 is an optional extra; document the settings module without it.
autodoc_mock_imports = ['PyQt5']

templates_path = ['_templates']
exclude_patterns = []

# -- Options for HTML output -------------------------------------------------

html_static_path = ['_static']
