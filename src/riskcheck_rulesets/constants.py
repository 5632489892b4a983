"""Assessment constants shared across the SDK.

These values are referenced by the engine, editor, and report builder.
They mirror conventions encoded in the YAML rulesets under ``v1/``.

Several constants can be overridden via environment variables so that
deployments can adjust scoring thresholds without code changes.
"""

import os

# Answer tokens accepted by binary questions, in presentation order.
ANSWER_TOKENS: tuple[str, ...] = ("Yes", "No", "N/A")

# Legal answer tokens per binary control type.
LEGAL_ANSWERS: dict[str, tuple[str, ...]] = {
    "binary3": ("Yes", "No", "N/A"),
    "binary2": ("Yes", "No"),
}

# Control types whose answers drive risk points and follow-up edges.
BINARY_TYPES: set[str] = set(LEGAL_ANSWERS)

# Control types whose answer is a list of strings.
LIST_TYPES: set[str] = {"multi_select", "tag_list"}

# Human-readable control type names for API responses and the editor.
CONTROL_TYPE_NAMES: dict[str, str] = {
    "binary3": "Buttons (Yes/No/N/A)",
    "binary2": "Buttons (Yes/No)",
    "free_text": "Text Input (Free-form)",
    "numeric": "Numeric Input",
    "multi_select": "Multi-Select",
    "tag_list": "Tag List (one entry at a time)",
    "composite_form": "Composite Form (named sub-fields)",
}

# Control type and text given to questions created in the editor.
DEFAULT_CONTROL_TYPE = "binary3"
NEW_QUESTION_TEXT = "New question text..."

# Answer token that triggers the classification jump on initial questions.
JUMP_ANSWER = "Yes"

# Risk profile thresholds (inclusive lower bounds).
# Overridable via HIGH_RISK_THRESHOLD / MODERATE_RISK_THRESHOLD env vars.
HIGH_RISK_THRESHOLD = int(os.getenv("HIGH_RISK_THRESHOLD", "40"))
MODERATE_RISK_THRESHOLD = int(os.getenv("MODERATE_RISK_THRESHOLD", "15"))

# How long a fetched class-code catalog stays fresh (default: one week).
CODE_CACHE_TTL_SECONDS = int(os.getenv("CODE_CACHE_TTL_SECONDS", str(60 * 60 * 24 * 7)))
