"""cborscope tests package.

Houses unit tests for:
- spans and the token source
- collection frames and the frame-stack engine
- text input, navigation, rendering, config and the CLI
"""


def hx(s: str) -> bytes:
    """Hex fixture helper: spaces and an optional 0x prefix are ignored."""
    s = s.replace(" ", "").lower()
    if s.startswith("0x"):
        s = s[2:]
    return bytes.fromhex(s)
