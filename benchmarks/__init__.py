"""
Benchmark suite for spanjson extraction and serialization performance.

Compares reading single fields with spanjson against parsing the whole
document with:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures read speed, serialization speed and peak memory.
"""
