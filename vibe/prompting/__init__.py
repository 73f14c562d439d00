"""Prompting package.

Holds the system prompts and CSS variable tables shared by the generation
pipelines. It performs no I/O and no model invocation.
"""
