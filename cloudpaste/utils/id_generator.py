"""Paste ID generation utility

This module provides a helper function for generating short, fixed-length,
non-sequential IDs based on a numeric counter and a secret salt value.

Functions:
    generate_paste_id(counter, salt='default_salt', length=10, mult=1315423911):
        Generate a URL-safe ID for a new paste.

Example:
    >>> from cloudpaste.utils import generate_paste_id
    >>> len(generate_paste_id(12345, salt='my_secret'))
    10
"""

import math
import string

import xxhash

from cloudpaste.constants import Defaults


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # base62: 26 lowercase + 26 uppercase + 10 digits


def generate_paste_id(counter: int, salt: str = Defaults.ID_SALT, length: int = Defaults.ID_LENGTH, mult: int = 1315423911) -> str:
    """Generate a fixed-length, URL-safe paste ID from a counter and salt.

    This function encodes a numeric counter into an n-character Base62 string
    (using a-z, A-Z, 0-9). The counter is salted and wrapped in modulo
    BASE^length to ensure fixed-length output.

    This implementation uses a **multiplicative permutation** over a fixed
    Base62 space to guarantee:
    - 1:1 mapping (bijective), so distinct counters never collide
    - Deterministic output
    - No visible sequential patterns

    Args:
        counter (int):
            Unique integer value identifying the paste (e.g. from PasteRedisDAO.count()).

        salt (str, optional):
            Secret string used to randomize the output space.
            Highly recommended to set a custom salt (ID_SALT).

        length (int, optional):
            Length of the resulting ID. Defaults to 10.

        mult (int, optional):
            Multiplicative factor for the permutation.
            Must be coprime with mod (BASE**length).

    Returns:
        str: A fixed-length alphanumeric ID derived from the counter and salt.

    NOTE:
        - With length=10 the ID space holds 62**10 (~8.4e17) values before the
          counter wraps around.
        - The output is not trivially predictable without knowledge of the salt
          and permutation parameters (this is obfuscation, not encryption).
    """
    if not isinstance(counter, int):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt}).')
    if math.gcd(mult, BASE**length) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({BASE**length}) (given value: mult={mult}).')

    # Affine permutation over the fixed modulo space: scrambles sequential
    # counters while preserving a 1:1 mapping for counter < BASE**length.
    modulo_space = BASE**length
    salt_hash = xxhash.xxh64_intdigest(salt) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space

    # Base62 encode, most significant digit first, padded to a fixed length
    return ''.join(reversed([ALPHABET[(permuted // BASE**i) % BASE] for i in range(length)])).rjust(length, ALPHABET[0])
