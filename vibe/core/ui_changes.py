"""UI change map merging and CSS custom-property naming.

A UI change map is a flat `{snake_case_name: value}` dict. Pipelines each
produce a partial map; the orchestrator merges them left to right so later
fragments win on key collisions.
"""


def merge_ui_changes(*fragments) -> dict:
    """Merge partial UI change maps; later fragments override earlier ones.

    `None` fragments (failed pipelines) are skipped.
    """
    merged = {}
    for fragment in fragments:
        if fragment:
            merged.update(fragment)
    return merged


def css_variable_name(key: str) -> str:
    """`primary_color` -> `--primary-color`."""
    return "--" + key.replace("_", "-")


def to_css_variables(ui_changes: dict) -> dict:
    """Render a UI change map as CSS custom properties.

    Font-family values are single-quoted so multi-word family names survive
    being assigned to a custom property.
    """
    variables = {}
    for key, value in ui_changes.items():
        name = css_variable_name(key)
        value = str(value)
        if "font-family" in name and not value.startswith("'"):
            value = f"'{value}'"
        variables[name] = value
    return variables
