"""Побайтовое сравнение результата с эталонным файлом."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class Comparison:
    """Итог сравнения.

    Fields:
        matches: Байты совпадают полностью, включая длину.
        first_mismatch: Смещение первого различия (или конца более короткого буфера).
        generated_length, reference_length: Длины сравниваемых буферов.
    """
    matches: bool
    first_mismatch: Optional[int]
    generated_length: int
    reference_length: int


def compare_bytes(generated: bytes, reference: bytes) -> Comparison:
    """Сравнивает два буфера; разная длина тоже считается несовпадением."""
    common = min(len(generated), len(reference))
    a = np.frombuffer(generated, dtype=np.uint8, count=common)
    b = np.frombuffer(reference, dtype=np.uint8, count=common)
    diff = np.flatnonzero(a != b)
    if diff.size:
        first: Optional[int] = int(diff[0])
    elif len(generated) != len(reference):
        first = common
    else:
        first = None
    return Comparison(
        matches=first is None,
        first_mismatch=first,
        generated_length=len(generated),
        reference_length=len(reference),
    )
