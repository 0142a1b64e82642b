"""Client-side tool declarations offered to the chat model."""

UPDATE_TOOL_NAME = "update_company_data"
UPDATE_SUCCESS_RESULT = "success: visualization updated"

_EVENT_CATEGORIES = ["founding", "product", "acquisition", "scandal", "general"]
_NODE_ROLES = ["root", "parent", "subsidiary", "department", "child"]

UPDATE_COMPANY_DATA_TOOL = {
    "name": UPDATE_TOOL_NAME,
    "description": (
        "Updates the company's timeline or organizational structure visualization. "
        "Use this when the user corrects information, asks to add missing events, "
        "or provides new details that should be reflected in the visual charts."
    ),
    "input_schema": {
        "type": "object",
        "$defs": {
            "orgNode": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "role": {"type": "string", "enum": _NODE_ROLES},
                    "description": {"type": "string"},
                    "children": {
                        "type": "array",
                        "items": {"$ref": "#/$defs/orgNode"},
                    },
                },
                "required": ["name", "role"],
            },
        },
        "properties": {
            "timeline": {
                "type": "array",
                "description": (
                    "The COMPLETE updated list of timeline events. You must include "
                    "existing unchanged events plus the new/modified ones."
                ),
                "items": {
                    "type": "object",
                    "properties": {
                        "year": {"type": "integer"},
                        "dateStr": {"type": "string"},
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                        "category": {"type": "string", "enum": _EVENT_CATEGORIES},
                    },
                    "required": ["year", "title", "description", "category"],
                },
            },
            "structure": {
                "$ref": "#/$defs/orgNode",
                "description": (
                    "The COMPLETE updated organizational structure tree. "
                    "Includes root and all children."
                ),
            },
        },
    },
}
