"""Scene composition and drawing.

Modules:
    overlay    — project layout into display pixels and draw it over an image
    list_view  — row models for the findings list
    __main__   — CLI: python -m evidencemark.render
"""
