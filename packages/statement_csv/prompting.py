"""Prompt and response schema for statement transaction extraction.

This module builds:
- The fixed system instructions for the extraction task.
- The strict ``text.format`` (JSON Schema) object for the OpenAI Responses
  API, requiring a top-level ``transactions`` array.
"""

from __future__ import annotations

from openai.types.responses.response_format_text_json_schema_config_param import (
    ResponseFormatTextJSONSchemaConfigParam,
)

TRANSACTIONS_KEY = "transactions"


def build_system_instructions() -> str:
    """Return the system prompt for extracting every statement transaction."""

    return (
        f"Extract all bank transactions as JSON array under key '{TRANSACTIONS_KEY}'. "
        "Fields: date (ISO), description, amount (number), currency. "
        "Important: The 'description' must capture EVERY detail from the transaction text "
        "without any summarization or omission. "
        "If the description consists of multiple lines in the source, include the content "
        "of all those lines. "
        "Preserve all reference numbers, dates, and names found in the transaction details."
    )


def build_response_format() -> ResponseFormatTextJSONSchemaConfigParam:
    """Return the strict JSON Schema format for the extraction response.

    Schema shape::

        {
          "transactions": [
            {"date": str, "description": str, "amount": number, "currency": str}
          ]
        }
    """

    result: ResponseFormatTextJSONSchemaConfigParam = {
        "type": "json_schema",
        "name": "statement_transactions",
        "schema": {
            "type": "object",
            "properties": {
                TRANSACTIONS_KEY: {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "date": {"type": "string"},
                            "description": {"type": "string"},
                            "amount": {"type": "number"},
                            "currency": {"type": "string"},
                        },
                        "required": ["date", "description", "amount", "currency"],
                        "additionalProperties": False,
                    },
                }
            },
            "required": [TRANSACTIONS_KEY],
            "additionalProperties": False,
        },
        "strict": True,
    }
    return result
