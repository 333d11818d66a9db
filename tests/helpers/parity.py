"""
Golden Bytes Helper

Byte-exact comparison of encoded buffers against hex vectors, with a row
diff on mismatch.
"""


def assert_hex_equal(actual: bytes, expected_hex: str, ctx: str) -> None:
    """
    Assert that actual bytes match expected hex string with detailed diff output.

    Args:
        actual: Actual bytes to compare
        expected_hex: Expected hex string (spaces allowed)
        ctx: Context string for error messages

    Raises:
        AssertionError: If bytes don't match, with detailed diff
    """
    expected_hex = expected_hex.replace(" ", "").lower()
    actual = bytes(actual)
    if actual.hex() == expected_hex:
        return

    expected_bytes = bytes.fromhex(expected_hex)

    print(f"\n[FAIL] Byte mismatch in {ctx}")
    print(f"   Expected length: {len(expected_bytes)} bytes")
    print(f"   Actual length:   {len(actual)} bytes")

    print(f"   {'Offset':<8} {'Expected':<48} {'Actual':<48}")
    max_len = max(len(expected_bytes), len(actual))
    for i in range(0, max_len, 16):
        exp_chunk = expected_bytes[i : i + 16]
        act_chunk = actual[i : i + 16]
        exp_hex = " ".join(f"{b:02x}" for b in exp_chunk).ljust(47)
        act_hex = " ".join(f"{b:02x}" for b in act_chunk).ljust(47)
        status = "" if exp_chunk == act_chunk else "DIFF"
        print(f"   {i:08x} {exp_hex} {act_hex} {status}")

    first_diff = next(
        (i for i in range(min(len(expected_bytes), len(actual))) if expected_bytes[i] != actual[i]),
        None,
    )
    if first_diff is not None:
        print(f"\n   First difference at byte offset {first_diff} (0x{first_diff:x})")

    raise AssertionError(f"Byte mismatch in {ctx}")
