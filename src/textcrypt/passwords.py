"""
Password Generation

Random passwords drawn from up to four character classes. Also used as
the key-material source for Blake3 keys, so the generated key file stays
printable.
"""

import random
import secrets
from typing import Callable, List
import structlog

logger = structlog.get_logger()

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWER = "abcdefghijklmnopqrstuvwxyz"
NUMBER = "1234567890"
SYMBOL = "!@#$%^&*_"


class ByteSourceRandom(random.Random):
    """
    random.Random driven by a callable returning n random bytes.

    Built the same way as secrets.SystemRandom, so choice() and shuffle()
    draw from the injected byte source instead of the Mersenne Twister.
    """

    def __init__(self, source: Callable[[int], bytes]):
        self._source = source
        super().__init__()

    def random(self) -> float:
        return (int.from_bytes(self._source(7), "big") >> 3) * 2 ** -53

    def getrandbits(self, k: int) -> int:
        if k < 0:
            raise ValueError("number of bits must be non-negative")
        if k == 0:
            return 0
        numbytes = (k + 7) // 8
        x = int.from_bytes(self._source(numbytes), "big")
        return x >> (numbytes * 8 - k)

    def seed(self, *args, **kwargs) -> None:
        return None

    def getstate(self):
        raise NotImplementedError("ByteSourceRandom has no state")

    def setstate(self, state):
        raise NotImplementedError("ByteSourceRandom has no state")


def generate_password(
    length: int = 16,
    upper: bool = True,
    lower: bool = True,
    number: bool = True,
    symbol: bool = True,
    rng=None,
) -> str:
    """
    Generate a random password.

    One character from every enabled class is always included; the rest
    are drawn from the union of enabled classes and the result is shuffled.

    Args:
        length: Total password length
        upper, lower, number, symbol: Which character classes to use
        rng: Object with choice() and shuffle() (random.Random compatible).
             Defaults to secrets.SystemRandom().

    Returns:
        The password
    """
    rng = rng or secrets.SystemRandom()

    classes: List[str] = []
    if upper:
        classes.append(UPPER)
    if lower:
        classes.append(LOWER)
    if number:
        classes.append(NUMBER)
    if symbol:
        classes.append(SYMBOL)

    if not classes:
        raise ValueError("At least one character class must be enabled")
    if length < len(classes):
        raise ValueError(
            f"Password length {length} is too short for {len(classes)} character classes"
        )

    pool = "".join(classes)
    password = [rng.choice(chars) for chars in classes]
    password.extend(rng.choice(pool) for _ in range(length - len(password)))
    rng.shuffle(password)

    logger.debug("password_generated", length=length, classes=len(classes))
    return "".join(password)
