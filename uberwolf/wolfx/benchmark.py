"""Timing of WolfX decryption attempts."""

from __future__ import annotations

import argparse
import os
import sys
import time
from typing import List, Optional, Union

from ..fileutils import file_to_buffer
from .crack import HEADER_SIZE, MIN_FILE_SIZE, WOLFX_MAGIC, decrypt_full

DEFAULT_KEY_COUNT = 100000
TEST_KEY = b"testkey"
TEST_MAGIC_STR = "testkey"
TEST_MAGIC_INT = 1337


def benchmark(
    filename: Union[str, "os.PathLike[str]"], num_keys: int = DEFAULT_KEY_COUNT
) -> float:
    """Run ``num_keys`` full decryptions of a WolfX file; return the seconds taken."""
    if num_keys <= 0:
        raise ValueError("the number of keys must be positive")

    enc_data = bytes(file_to_buffer(filename))
    if len(enc_data) < MIN_FILE_SIZE or not enc_data.startswith(WOLFX_MAGIC):
        raise ValueError("Invalid WOLFX file")

    test_keys = [TEST_KEY] * num_keys

    start = time.perf_counter()
    for key in test_keys:
        decrypt_full(enc_data, key, TEST_MAGIC_STR, TEST_MAGIC_INT)
    return time.perf_counter() - start


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry: time decryptions of one WolfX file."""
    parser = argparse.ArgumentParser(description="Measure WolfX decryption speed.")
    parser.add_argument("filename", help="encrypted .wolfx file")
    parser.add_argument(
        "--keys", type=int, default=DEFAULT_KEY_COUNT, help="number of keys to try"
    )
    args = parser.parse_args(argv)

    print("Testing decryption speed ... ", end="", flush=True)
    try:
        elapsed = benchmark(args.filename, args.keys)
    except (OSError, ValueError) as exc:
        print("Failed")
        print(exc, file=sys.stderr)
        return 1
    print("Done")

    rate = args.keys / elapsed if elapsed > 0 else float("inf")
    print(f"Decryption time: {elapsed} seconds")
    print(f"Decryptions per second: {rate}")
    return 0


_ = HEADER_SIZE

if __name__ == "__main__":
    sys.exit(main())