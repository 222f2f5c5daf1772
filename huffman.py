import heapq
import logging
from dataclasses import dataclass
from itertools import count
from typing import Dict, Iterable, Mapping, Optional, Union

logger = logging.getLogger(__name__)


class HuffmanError(ValueError):
    """Base class for every failure raised by the codec."""


class UnreadableSourceError(HuffmanError):
    pass


class UnencodableSymbolError(HuffmanError):
    def __init__(self, symbol: str):
        super().__init__(f"symbol {symbol!r} has no code in this table")
        self.symbol = symbol


class InvalidCodeError(HuffmanError):
    def __init__(self, message: str, position: int):
        super().__init__(f"{message} (at bit {position})")
        self.position = position


class EmptyAlphabetError(HuffmanError):
    def __init__(self):
        super().__init__("cannot decode against an empty alphabet")


@dataclass(frozen=True)
class HuffmanLeaf: # leaf node: one symbol and its count
    symbol: str
    frequency: int


@dataclass(frozen=True)
class HuffmanInternal: # internal node: aggregate count and exactly two children
    frequency: int
    left: "HuffmanNode"
    right: "HuffmanNode"


HuffmanNode = Union[HuffmanLeaf, HuffmanInternal]


def build_huffman_tree(frequency_table: Mapping[str, int]) -> Optional[HuffmanNode]: # frequency_table: dict of symbol -> frequency
    """
    Greedy bottom-up construction. Returns None for an empty table and a lone
    leaf when there is a single symbol (nothing to merge).

    Ties on frequency are broken by insertion order: leaves go in by ascending
    symbol, merged nodes after them, so a given table always yields the same tree.
    """
    sequence = count()
    priority_queue = []
    for symbol in sorted(frequency_table):
        frequency = frequency_table[symbol]
        if frequency < 1:
            raise ValueError(f"frequency for {symbol!r} must be positive, got {frequency}")
        priority_queue.append((frequency, next(sequence), HuffmanLeaf(symbol, frequency)))
    heapq.heapify(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        left_freq, _, left = heapq.heappop(priority_queue)
        right_freq, _, right = heapq.heappop(priority_queue)
        merged = HuffmanInternal(left_freq + right_freq, left, right) # first popped goes left
        heapq.heappush(priority_queue, (merged.frequency, next(sequence), merged))

    if not priority_queue:
        logger.debug("empty frequency table, no tree built")
        return None

    root = priority_queue[0][2]
    logger.debug("built huffman tree over %d symbols, root frequency %d", len(frequency_table), root.frequency)
    return root # root of the tree


def generate_huffman_codes(root: Optional[HuffmanNode]) -> Dict[str, str]: # root: root of the Huffman tree
    if root is None:
        return {}

    # Only one symbol -> there is no left/right path, so its code is fixed to "0"
    if isinstance(root, HuffmanLeaf):
        return {root.symbol: "0"}

    codes = {}
    stack = [(root, "")]
    while stack:
        node, current_code = stack.pop()
        if isinstance(node, HuffmanLeaf):
            codes[node.symbol] = current_code
            continue
        # right pushed first so the left subtree is visited first
        stack.append((node.right, current_code + "1"))
        stack.append((node.left, current_code + "0"))

    return codes # mapping of symbols to their Huffman codes


def is_prefix_free(codes: Mapping[str, str]) -> bool:
    # After sorting, any code that prefixes another sorts directly before one it prefixes
    ordered = sorted(codes.values())
    return all(not b.startswith(a) for a, b in zip(ordered, ordered[1:]))


def average_code_length(codes: Mapping[str, str], frequency_table: Mapping[str, int]) -> float:
    """Weighted average code length in bits per symbol."""
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    return sum(len(codes[s]) * f for s, f in frequency_table.items()) / total


def huffman_encode(symbols: Iterable[str], codes: Mapping[str, str]) -> str: # symbols: characters to encode, codes: dict of symbol -> Huffman code
    parts = []
    for symbol in symbols:
        code = codes.get(symbol)
        if code is None:
            logger.debug("cannot encode %r", symbol)
            raise UnencodableSymbolError(symbol)
        parts.append(code)
    return "".join(parts)


def huffman_decode(bitstring: str, root: Optional[HuffmanNode]) -> str: # bitstring: the encoded string of '0's and '1's
    """
    Walks the tree once per emitted symbol, restarting at the root each time.

    Raises InvalidCodeError for a character other than '0'/'1' or when the
    input ends part way down a path, and EmptyAlphabetError when there is no
    tree to walk. An empty bitstring always decodes to "".
    """
    if not bitstring:
        return ""
    if root is None:
        raise EmptyAlphabetError()

    # Lone leaf: every bit must be '0' and each one stands for the symbol
    if isinstance(root, HuffmanLeaf):
        for i, bit in enumerate(bitstring):
            if bit != "0":
                raise InvalidCodeError(f"unexpected bit {bit!r} for a single-symbol code", i)
        return root.symbol * len(bitstring)

    decoded = []
    node = root
    for i, bit in enumerate(bitstring):
        if bit == "0":
            node = node.left
        elif bit == "1":
            node = node.right
        else:
            logger.debug("invalid bit %r at %d", bit, i)
            raise InvalidCodeError(f"invalid bit {bit!r}", i)

        # Leaf -> emit and start over from the root
        if isinstance(node, HuffmanLeaf):
            decoded.append(node.symbol)
            node = root

    if node is not root:
        raise InvalidCodeError("bit string ends inside a code", len(bitstring))

    return "".join(decoded)
