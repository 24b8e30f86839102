"""
Test data generators for extraction and serialization benchmarks.

Creates API-shaped JSON documents for performance testing:
- Chat completion responses (small, and with long escaped content)
- Batch listings with many records
- Request bodies for the serializer
"""

import json
import random
import string
from typing import Any

# Probability of an escape sequence per generated content character
_ESCAPE_PROBABILITY = 0.1


def generate_test_data(data_type: str) -> str:
    """Generates JSON response text based on specified type."""
    generators = {
        "chat_completion": _generate_chat_completion,
        "long_content": _generate_long_content,
        "batch_list": _generate_batch_list,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]()


def generate_request_body(message_count: int = 20) -> dict[str, Any]:
    """Generates a chat request body with escaped message content."""
    return {
        "model": "llama3-8b-8192",
        "messages": [
            {
                "role": random.choice(["system", "user", "assistant"]),
                "content": _escaped_content(200),
            }
            for _ in range(message_count)
        ],
        "temperature": round(random.uniform(0.0, 2.0), 2),
        "max_tokens": random.randint(16, 4096),
        "stop": ["\n\n", "END"],
        "stream": False,
    }


def _chat_completion(content: str, choices: int = 1) -> dict[str, Any]:
    return {
        "id": f"chatcmpl-{_random_string(24)}",
        "object": "chat.completion",
        "created": random.randint(1700000000, 1800000000),
        "model": "llama3-8b-8192",
        "choices": [
            {
                "index": i,
                "message": {"role": "assistant", "content": content},
                "logprobs": None,
                "finish_reason": random.choice(["stop", "length"]),
            }
            for i in range(choices)
        ],
        "usage": {
            "queue_time": round(random.uniform(0, 0.1), 9),
            "prompt_tokens": random.randint(1, 4096),
            "completion_tokens": random.randint(1, 4096),
            "total_tokens": random.randint(1, 8192),
        },
        "system_fingerprint": f"fp_{_random_string(10)}",
        "x_groq": {"id": f"req_{_random_string(26)}"},
    }


def _generate_chat_completion() -> str:
    """Generates a small chat completion response (< 1KB)."""
    return json.dumps(_chat_completion("Short answer.", choices=2), indent=2)


def _generate_long_content() -> str:
    """Generates a chat completion whose content holds many escapes."""
    return json.dumps(_chat_completion(_escaped_content(20000)))


def _generate_batch_list() -> str:
    """Generates a batch listing with many records."""
    data = {
        "object": "list",
        "data": [
            {
                "id": f"batch_{_random_string(26)}",
                "object": "batch",
                "endpoint": "/v1/chat/completions",
                "status": random.choice(
                    ["validating", "in_progress", "completed", "failed"]
                ),
                "created_at": random.randint(1700000000, 1800000000),
                "output_file_id": random.choice(
                    [None, f"file_{_random_string(26)}"]
                ),
                "request_counts": {
                    "total": 10,
                    "completed": random.randint(0, 10),
                    "failed": random.randint(0, 10),
                },
                "metadata": {"job": _random_string(8), "attempt": i},
            }
            for i in range(500)
        ],
        "has_more": False,
    }
    return json.dumps(data)


def _escaped_content(length: int) -> str:
    """Creates text whose JSON form needs escape sequences."""
    chars = []
    for _ in range(length):
        if random.random() < _ESCAPE_PROBABILITY:
            chars.append(random.choice(['"', "\\", "\n", "\t", "{", "]"]))
        else:
            chars.append(
                random.choice(string.ascii_letters + string.digits + " ")
            )
    return "".join(chars)


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_lowercase, k=length))
