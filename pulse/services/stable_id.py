from __future__ import annotations

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_DIGITS[r])
    return "".join(reversed(out))


def stable_id(text: str) -> str:
    """
    Deterministic short token for a piece of text (31-multiplier int32 rolling hash, base 36).

    Hashes UTF-16 code units so tokens already stored by earlier runs keep matching.
    """
    h = 0
    data = (text or "").encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return _to_base36(abs(h))
