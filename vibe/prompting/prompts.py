"""System prompts and CSS variable tables for the generation pipelines.

Design constraints:
    - Plain constants only; no I/O, no global state mutation.
    - The key tuples double as JSON-schema property lists, so their order is the
      order the model sees.

Prompt safety model:
    User text is never interpolated into these prompts. It is sent as a separate
    user message by `vibe.llm.service.request_structured`.
"""


# =========================================================
# SYSTEM PROMPTS
# =========================================================

KEYWORDS_PROMPT = (
    "You are an SEO expert. The user will give you a long prompt in prose asking for a theme.\n"
    "Your job is to return a short list of keywords based on their prompt. The keywords should be suitable\n"
    "for a search engine to find material based on their theme.\n"
)

PALETTE_PROMPT = (
    "You are a color theory expert and creative AI specializing in generating hex color palettes based on a given theme.\n"
    "You must extract the color palette for the theme from the images provided.\n\n"
    "Your goal is to provide visually appealing and relevant color sets that capture the essence of the given theme.\n\n"
    "Ruleset for UI Color Generation:\n"
    "- Avoid pure white (#FFFFFF) or pure black (#000000), pick more vibrant colors.\n"
    "- text_color must never be the same as input_background.\n"
    "- Avoid using colors that are too similar in brightness or hue between text and background.\n"
    "- primary_color should set the theme and be prominent (e.g., accent buttons, UI highlights).\n"
    "- secondary_color should complement the primary color without overpowering it.\n"
    "- background_color and page_bg should be distinct from foreground elements.\n"
    "- user_message_background and assistant_message_background should be separate from chat_background to avoid blending.\n"
    "- border_color should provide subtle contrast but not be jarring.\n"
    "- When using pop culture or nostalgic themes, colors should reflect widely recognized palettes.\n"
    "- Ensure interactive elements (send_button_bg, attachment_button_bg) are easily distinguishable from static elements.\n"
    "- Make sure that info_button_color is never the same color as header_background, or it will not be visible.\n"
)

FONT_NAME_PROMPT = (
    "You are a font and typography expert. The user will give you a theme, and you must reply with a font name to match the theme.\n"
    "The font must be an existing font available on Google Fonts. Play it safe and pick fonts that we can be confident exist.\n"
)

FONT_VARS_PROMPT = (
    "You are a font and typography expert. Determine appropriate font variables for the given font string.\n"
    "There should only be one font name per variable, do not use comma-separated fallbacks.\n"
)

LAYOUT_PROMPT = (
    "You are a UI design expert. Based on the playful theme given by the user, choose appropriate size/layout variables.\n"
)

GREETING_PROMPT = (
    "You are a sly, charming greeter, welcoming a guest into a new interface design.\n"
    "Based on the theme you're given, introduce the UI that surrounds you with a smart play on words.\n"
    "The play on words should be based on the theme you are given.\n"
    "It should only be once short sentence.\n"
    "Finish with an emoji.\n"
)


# =========================================================
# CSS VARIABLE TABLES
# =========================================================
# Keys are the snake_case names the front end maps to `--kebab-case` custom
# properties (see `vibe.core.ui_changes.to_css_variables`).

COLOR_KEYS = (
    "primary_color",
    "secondary_color",
    "background_color",
    "text_color",
    "text_primary",
    "text_secondary",
    "page_bg",
    "border_color",
    "input_background",
    "chat_background",
    "header_background",
    "header_text_color",
    "user_message_background",
    "user_message_text_color",
    "assistant_message_background",
    "assistant_message_text_color",
    "user_message_border_color",
    "assistant_message_border_color",
    "button_icon_color",
    "send_button_bg",
    "send_button_color",
    "attachment_button_bg",
    "attachment_button_color",
    "info_button_color",
)

LAYOUT_KEYS = (
    "bubble_size",
    "bubble_padding",
    "bubble_radius",
    "bubble_shadow",
    "bubble_max_width",
    "chat_container_max_width",
    "border_width",
    "border_style",
    "global_border_radius",
    "message_margin_bottom",
    "animation_speed",
    "transition_effect",
)

FONT_NAME_KEYS = ("primary_font_name", "fallback_font_name")

FONT_VAR_KEYS = (
    "header_font_family",
    "header_font_weight",
    "message_font_family",
    "message_font_weight",
    "placeholder_font_family",
    "placeholder_font_weight",
)
