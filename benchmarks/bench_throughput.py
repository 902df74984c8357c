"""Benchmark: WhyLang tokenizer throughput.

Measures how many full tokenize passes, and how many tokens per second,
the lexer sustains using the public ``whylang.tokenize()`` and
``Tokenizer.next_token()`` APIs.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import whylang
from whylang import TokenType

_ITERATIONS: int = 2_000
_STREAM_REPEAT: int = 500

_SAMPLE_SOURCE = """
// Numeric helpers
extern sin(x);
extern cos(x);

def norm(x, y) {
  var scale = 1.5e-3;
  return (x * x + y * y) * scale;
}

/* Branches and comparisons */
def clamp(v, lo, hi)
  if v < lo then lo
  else if v >= hi then hi
  else v;

def greet(name) print("hello, " + name + "\\n");
"""


def bench_tokenize_throughput() -> dict[str, object]:
    """Benchmark full-source tokenization throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        whylang.tokenize(_SAMPLE_SOURCE)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "whylang_tokenize_throughput",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_stream_throughput() -> dict[str, object]:
    """Benchmark pull-based streaming over one large source.

    Returns
    -------
    dict with keys: operation, tokens, total_seconds, tokens_per_second.
    """
    source = _SAMPLE_SOURCE * _STREAM_REPEAT
    lexer = whylang.Tokenizer(source)

    count = 0
    start = time.perf_counter()
    while lexer.next_token().type is not TokenType.EOF:
        count += 1
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "whylang_stream_throughput",
        "tokens": count,
        "total_seconds": round(total, 4),
        "tokens_per_second": round(count / total, 1),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['tokens_per_second']:,.0f} tokens/sec  "
        f"({count:,} tokens)"
    )
    return result


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_tokenize_throughput, "tokenize_throughput_baseline.json"),
        (bench_stream_throughput, "stream_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
