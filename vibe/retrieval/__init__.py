"""Retrieval package.

Architectural role:
    Fetches external material the pipelines ground their prompts on: themed
    reference images from web image search and font metadata/stylesheets from
    Google Fonts.
"""
