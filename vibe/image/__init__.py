"""Image processing package.

Scope:
    Palette extraction, outlier screening, resizing, and horizontal stitching of
    reference images into one collage for the color pipeline.

Non-goals:
    - No image generation.
    - No persistence; every buffer lives only for one request.
"""
