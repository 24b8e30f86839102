"""
Pytest configuration and shared fixtures for spanjson tests.

Provides immutable test case containers and realistic API response bodies
used across the extraction, materialization and round-trip tests.
"""

from dataclasses import dataclass
from typing import Any

import pytest

import spanjson

# Pretty-printed like a real response body; escapes are JSON escapes.
CHAT_COMPLETION = r"""
{
  "id": "chatcmpl-f51b2cd2-bef7-417e-964e-a08f0b513c22",
  "object": "chat.completion",
  "created": 1730241104,
  "model": "llama3-8b-8192",
  "choices": [
    {
      "index": 0,
      "message": {
        "role": "assistant",
        "content": "Fast models matter because \"latency\" compounds.\nThey {often} [help], too."
      },
      "logprobs": null,
      "finish_reason": "stop"
    },
    {
      "index": 1,
      "message": {
        "role": "assistant",
        "content": "Second choice"
      },
      "logprobs": null,
      "finish_reason": "length"
    }
  ],
  "usage": {
    "queue_time": 0.037493756,
    "prompt_tokens": 18,
    "prompt_time": 0.000680594,
    "completion_tokens": 556,
    "completion_time": 0.463333333,
    "total_tokens": 574,
    "total_time": 0.464013927
  },
  "system_fingerprint": "fp_179b0f92c9",
  "x_groq": {"id": "req_01jbd6g2qdfw2adyrt2az8hz4w"}
}
"""

FIRST_CHOICE_CONTENT = (
    'Fast models matter because "latency" compounds.\n'
    "They {often} [help], too."
)

BATCH_LIST = r"""{
  "object": "list",
  "data": [
    {
      "id": "batch_01jh6xa7reempvjyh6n3yst2zw",
      "object": "batch",
      "endpoint": "/v1/chat/completions",
      "status": "completed",
      "created_at": 1736472600,
      "output_file_id": "file_01jh6xa97be52b7pg88czwrrwb",
      "request_counts": {"total": 10, "completed": 9, "failed": 1},
      "metadata": {"job": "nightly", "attempt": 2, "note": null}
    },
    {
      "id": "batch_01jh6xb2qaeempvjyh6n3yst2zx",
      "object": "batch",
      "endpoint": "/v1/chat/completions",
      "status": "in_progress",
      "created_at": 1736472700,
      "output_file_id": null,
      "request_counts": {"total": 5, "completed": 0, "failed": 0},
      "metadata": null
    }
  ],
  "has_more": false
}"""


@dataclass(frozen=True)
class PathCase:
    """
    Immutable container for one path extraction expectation.

    Holds the document, the path and kind to request, and the decoded
    value the extraction must produce.
    """

    description: str
    document: str
    path: str
    kind: spanjson.ValueKind
    expected: Any


@pytest.fixture
def chat_completion() -> str:
    return CHAT_COMPLETION


@pytest.fixture
def batch_list() -> str:
    return BATCH_LIST


@pytest.fixture
def response_path_cases() -> list[PathCase]:
    """
    Provides the paths service code reads from typical API responses.

    Covers nested objects, indexed arrays, every scalar kind, and string
    content containing escaped quotes, newlines and structural characters.
    """
    kind = spanjson.ValueKind
    return [
        PathCase(
            "top-level string",
            CHAT_COMPLETION,
            "object",
            kind.STRING,
            "chat.completion",
        ),
        PathCase(
            "top-level long", CHAT_COMPLETION, "created", kind.LONG, 1730241104
        ),
        PathCase(
            "nested int", CHAT_COMPLETION, "usage.total_tokens", kind.INT, 574
        ),
        PathCase(
            "nested double",
            CHAT_COMPLETION,
            "usage.queue_time",
            kind.DOUBLE,
            0.037493756,
        ),
        PathCase(
            "indexed string",
            CHAT_COMPLETION,
            "choices[0].finish_reason",
            kind.STRING,
            "stop",
        ),
        PathCase(
            "second element",
            CHAT_COMPLETION,
            "choices[1].finish_reason",
            kind.STRING,
            "length",
        ),
        PathCase(
            "escaped content",
            CHAT_COMPLETION,
            "choices[0].message.content",
            kind.STRING,
            FIRST_CHOICE_CONTENT,
        ),
        PathCase(
            "object after array",
            CHAT_COMPLETION,
            "x_groq.id",
            kind.STRING,
            "req_01jbd6g2qdfw2adyrt2az8hz4w",
        ),
        PathCase("boolean", BATCH_LIST, "has_more", kind.BOOLEAN, False),
        PathCase(
            "deep indexed int",
            BATCH_LIST,
            "data[0].request_counts.failed",
            kind.INT,
            1,
        ),
    ]
