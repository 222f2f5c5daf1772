import math
from collections import Counter
from typing import Mapping

from text_source import iter_lines


def build_frequency_table(text: str) -> Counter:
    """
    Count every symbol of text, line by line.

    The line terminator is not part of a line, so '\\n' is added back at the
    end with the number of line breaks seen (only if there was at least one).
    """
    ft = Counter()
    line_breaks = 0
    for line, terminated in iter_lines(text):
        ft.update(line)
        if terminated:
            line_breaks += 1
    if line_breaks > 0:
        ft["\n"] = line_breaks
    return ft


def frequency_entropy(frequency_table: Mapping[str, int]) -> float:
    # Shannon entropy in bits per symbol
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    probabilities = [f / total for f in frequency_table.values()]
    return -sum(p * math.log2(p) for p in probabilities)
