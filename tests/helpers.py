# tests/helpers.py
"""
テスト用の補助クラスと関数。
"""


# @intent:utility_class 呼び出されるたびに一定量進むテスト用のクロック（ナノ秒）。
class FakeClock:
    def __init__(self, step: int = 20_000_000, start: int = 0):
        self.now = start
        self.step = step
        self.calls = 0

    def __call__(self) -> int:
        self.now += self.step
        self.calls += 1
        return self.now

    def advance(self, ticks: int) -> None:
        self.now += ticks


def program(*words: int) -> bytes:
    """命令ワードの並びをビッグエンディアンのバイト列に変換します。"""
    data = bytearray()
    for word in words:
        data += bytes([word >> 8, word & 0xFF])
    return bytes(data)
