"""
Huffman text codec experiments

Runs repeated build/encode/decode passes over synthetic text and records
timings, code lengths and how close the code gets to the source entropy.

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 128 --exp2_max_kb 512
  python experiments.py --outdir results --exp1_generators uniform256,zipf128,english_like
"""

from __future__ import annotations

import argparse
import csv
import logging
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib.pyplot as plt

import huffman as huff
from codec import HuffmanCodec
from config import configure_logging
from frequency import frequency_entropy

logger = logging.getLogger(__name__)


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _cdf(weights: List[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf


# Synthetic text generators (one character per byte value, latin-1 style)

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> str:
    rng = random.Random(seed)
    return "".join(chr(rng.randrange(0, alphabet)) for _ in range(size))

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    other_symbols = [chr(i) for i in range(256) if chr(i) != dominant]
    out = []
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(other_symbols))
    return "".join(out)

def gen_zipf_like(size: int, alphabet: int = 128, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return "".join(chr(_sample_cdf(rng, cdf)) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)

    cdf = _cdf(weights)
    return "".join(chars[_sample_cdf(rng, cdf)] for _ in range(size))

def gen_single_symbol(size: int, symbol: str = "a") -> str:
    return symbol * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform128": lambda size, seed: gen_uniform(size, alphabet=128, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant="A", dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant="A", dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    """
    If a dataset name is not recognized, fall back to uniform256 so the
    run does not stop part way through
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        logger.warning("unknown dataset %r, using uniform256", name)
        return f"{name}_fallback_uniform256", gen_uniform(size, alphabet=256, seed=seed)
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    text_length: int
    run_id: int
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    compression_ratio: float  # encoded bits / (8 * text length)
    avg_code_length: float
    entropy_bits: float
    code_efficiency: float  # entropy / avg code length

    prefix_free_ok: int  # 1 or 0
    correctness_ok: int  # 1 or 0


def run_one(text: str) -> MetricRow:
    # build (frequency table + tree + code table)
    t0 = now_ns()
    codec = HuffmanCodec(text)
    t1 = now_ns()
    build_ms = ns_to_ms(t1 - t0)

    # encode
    t2 = now_ns()
    bits = codec.encode(text)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    # decode
    t4 = now_ns()
    decoded = codec.decode(bits)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    avg_len = huff.average_code_length(codec.codes, codec.frequencies)
    entropy = frequency_entropy(codec.frequencies)

    return MetricRow(
        exp_name="",
        dataset_name="",
        text_length=len(text),
        run_id=0,
        unique_symbols=codec.alphabet_size,
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        encoded_bits=len(bits),
        compression_ratio=len(bits) / max(1, 8 * len(text)),
        avg_code_length=avg_len,
        entropy_bits=entropy,
        code_efficiency=(entropy / avg_len) if avg_len else 0.0,
        prefix_free_ok=1 if huff.is_prefix_free(codec.codes) else 0,
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


SUMMARY_METRICS = [
    "compression_ratio", "avg_code_length", "code_efficiency",
    "build_ms", "encode_ms", "decode_ms", "total_ms",
]


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, text_length and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.text_length)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "text_length", "n_runs", "unique_symbols"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, length = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "text_length": length,
                "n_runs": len(items),
                "unique_symbols": max(x.unique_symbols for x in items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "avg_code_length") for d in datasets], marker="o", label="huffman")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="x", linestyle="--", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Code Length vs Entropy by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()

    plt.figure()
    for field, label in (("encode_ms", "encode"), ("decode_ms", "decode"), ("build_ms", "build")):
        plt.plot(x, [mean_for(d, field) for d in datasets], marker="o", label=label)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Time (ms)")
    plt.title("Experiment 1: Build / Encode / Decode Time by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_times.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    distributions = sorted(set(r.dataset_name for r in exp_rows))

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.text_length for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.text_length == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for field, label in (("encode_ms", "encode"), ("decode_ms", "decode")):
            plt.plot(sizes, [mean_size(s, field) for s in sizes], marker="o", label=label)
        plt.xlabel("Text Length (symbols)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Encode / Decode Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_times_{dist}.png", dpi=200)
        plt.close()

        plt.figure()
        plt.plot(sizes, [mean_size(s, "compression_ratio") for s in sizes], marker="o")
        plt.xlabel("Text Length (symbols)")
        plt.ylabel("Encoded Bits / Original Bits")
        plt.title(f"Experiment 2: Compression Ratio vs Size ({dist})")
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_compression_ratio_{dist}.png", dpi=200)
        plt.close()


def plot_experiment_3(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp3_alphabet_size"]
    if not exp_rows:
        return

    alphabets = sorted(set(r.unique_symbols for r in exp_rows))

    def mean_alpha(n: int, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.unique_symbols == n]
        return statistics.mean(vals) if vals else float("nan")

    plt.figure()
    plt.plot(alphabets, [mean_alpha(n, "avg_code_length") for n in alphabets], marker="o", label="huffman")
    plt.plot(alphabets, [mean_alpha(n, "entropy_bits") for n in alphabets], marker="x", linestyle="--", label="entropy")
    plt.xscale("log", base=2)
    plt.xlabel("Distinct Symbols")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 3: Code Length vs Alphabet Size (uniform)")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp3_code_length.png", dpi=200)
    plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--log-level", type=str, default=None, help="Logging level (default: WARNING)")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")
    ap.add_argument("--no_exp3", action="store_true", help="Disable experiment 3 (alphabet size)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=64, help="Experiment 1 fixed text size in K symbols")
    ap.add_argument("--exp1_generators", type=str, default="uniform256,zipf128,repetitive90,english_like",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=1, help="Experiment 2 min size in K symbols (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=256, help="Experiment 2 max size in K symbols (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="zipf128,english_like",
                    help="Comma-separated dataset generator names for experiment 2")

    # Experiment 3 controls
    ap.add_argument("--exp3_size_kb", type=int, default=32, help="Experiment 3 fixed text size in K symbols")

    args = ap.parse_args()
    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        ap.error(str(exc))

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                dataset_name, text = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                row = run_one(text)
                row.exp_name = "exp1_distribution"
                row.dataset_name = dataset_name
                row.run_id = run_id
                rows.append(row)

    # Experiment 2: size scaling (powers of 2)
    if not args.no_exp2:
        min_size = max(1, args.exp2_min_kb) * 1024
        max_size = max(1, args.exp2_max_kb) * 1024

        sizes: List[int] = []
        s = min_size
        while s <= max_size:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.exp2_generators):
            for size in sizes:
                for run_id in range(1, args.runs + 1):
                    dataset_name, text = generate_dataset(gen_name, size, args.seed + 10_000 + size + run_id)
                    row = run_one(text)
                    row.exp_name = "exp2_size_scaling"
                    row.dataset_name = dataset_name
                    row.run_id = run_id
                    rows.append(row)

    # Experiment 3: uniform text over growing alphabets
    if not args.no_exp3:
        size = max(1, args.exp3_size_kb) * 1024
        for alphabet in (2, 4, 8, 16, 32, 64, 128, 256):
            for run_id in range(1, args.runs + 1):
                text = gen_uniform(size, alphabet=alphabet, seed=args.seed + 200_000 + alphabet + run_id)
                row = run_one(text)
                row.exp_name = "exp3_alphabet_size"
                row.dataset_name = f"uniform{alphabet}"
                row.run_id = run_id
                rows.append(row)

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    plot_experiment_1(rows, outdir)
    plot_experiment_2(rows, outdir)
    plot_experiment_3(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Round-trip correctness rate: {ok_rate:.3f}")
    return 0 if ok_rate == 1.0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
