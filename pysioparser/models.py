# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Pydantic configuration models for pysioparser.

Provides validated settings for the Encoder and Decoder.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


# Largest attachment count a single header may announce unless configured
DEFAULT_MAX_ATTACHMENTS: int = 10


class EncoderConfig(BaseModel):
    """Configuration for the packet Encoder."""

    model_config = ConfigDict(validate_assignment=True)

    ensure_ascii: bool = Field(
        default=False,
        description="Escape non-ASCII characters in JSON payloads",
    )
    json_default: Optional[Callable[[Any], Any]] = Field(
        default=None,
        description="Fallback for objects json.dumps cannot serialize",
    )


class DecoderConfig(BaseModel):
    """Configuration for the packet Decoder."""

    model_config = ConfigDict(validate_assignment=True)

    max_attachments: int = Field(
        default=DEFAULT_MAX_ATTACHMENTS,
        ge=0,
        description="Largest attachment count accepted in a binary header",
    )
    json_object_hook: Optional[Callable[[dict[str, Any]], Any]] = Field(
        default=None,
        description="object_hook passed to json.loads for payloads",
    )
    decode_base64: bool = Field(
        default=True,
        description="Normalize attachments to bytes (base64-tagged ones decoded) before substitution",
    )
