"""Label layout in normalized space.

Modules:
    placement   — directional-offset label placement with clamping and optional stacking
    connectors  — anchor-to-label connector segments and dash splitting
"""
