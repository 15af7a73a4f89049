import json
import logging
import os
from typing import Dict, Iterable

import click

from data_loader.word_list_loader import WordListLoader
from membership.algorithms.hashing import CorrelatedHashPair, IndependentHashPair
from membership.algorithms.independence import check_independence, h1_h2_correlation
from membership.algorithms.sizing import optimal_parameters
from membership.errors import InvalidConfig
from membership.evaluation import FalsePositiveExperiment, measure_false_positive_rate, random_probes
from plot.false_positive_chart import plot_false_positive_rate

logger = logging.getLogger("membership.cli")

INDEPENDENCE_SAMPLES = 2000


def setup_logging():
    log_level = os.getenv("MEMBERSHIP_LOG_LEVEL", "WARNING").upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )
    logging.getLogger("membership").setLevel(log_level)


@click.command()
@click.option(
    "--words-file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=str),
    required=True,
    help="Plain-text word list, one entry per line.",
)
@click.option(
    "--expected-items",
    type=int,
    default=None,
    help="Expected number of items; defaults to the size of the word list.",
)
@click.option(
    "--error-rate",
    type=float,
    default=0.02,
    show_default=True,
    help="Desired false positive rate used to derive m and k.",
)
@click.option("--bits", "-m", "bits", type=int, default=None, help="Explicit bit-array length (requires --hashes).")
@click.option("--hashes", "-k", "hashes", type=int, default=None, help="Explicit number of hash rounds (requires --bits).")
@click.option(
    "--query",
    "queries",
    multiple=True,
    help="Check a term against the filter. Repeat for multiple terms.",
)
@click.option(
    "--probe-count",
    type=int,
    default=10_000,
    show_default=True,
    help="Number of random non-member strings used to measure the false positive rate.",
)
@click.option(
    "--holdout",
    type=float,
    default=0.0,
    show_default=True,
    help="Fraction of the word list kept out of the filter and used as real-word probes.",
)
@click.option("--seed", type=int, default=0, show_default=True, help="Seed for hashing and probe generation.")
@click.option(
    "--correlated/--independent",
    "correlated",
    default=False,
    show_default=True,
    help="Derive h2 from h1 (reproduces the independence defect) instead of hashing the input twice.",
)
@click.option(
    "--checkpoints",
    type=int,
    default=10,
    show_default=True,
    help="Number of snapshots taken while inserting the word list.",
)
@click.option(
    "--plot-file",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    default=None,
    help="Write the false positive chart to this file.",
)
def main(
        words_file: str,
        expected_items: int | None,
        error_rate: float,
        bits: int | None,
        hashes: int | None,
        queries: Iterable[str],
        probe_count: int,
        holdout: float,
        seed: int,
        correlated: bool,
        checkpoints: int,
        plot_file: str | None,
) -> None:
    """
    Load a word list into a Bloom Filter, answer queries, and measure the
    observed false positive rate against random non-member probes.
    """
    setup_logging()

    loader = WordListLoader(words_file)
    words = loader.load_data()
    held_out = []
    if holdout > 0:
        words, held_out = loader.split(holdout=holdout, random_state=seed)
    if not words:
        raise click.ClickException(f"No words found in {words_file}")

    if (bits is None) != (hashes is None):
        raise click.UsageError("--bits and --hashes must be given together")

    try:
        if bits is not None:
            m, k, source = bits, hashes, "explicit"
        else:
            params = optimal_parameters(expected_items or len(words), error_rate)
            m, k, source = params.m, params.k, "derived"
        hash_pair = CorrelatedHashPair(seed=seed) if correlated else IndependentHashPair(seed=seed)
        experiment = FalsePositiveExperiment(m, k, probe_count=probe_count, hash_pair=hash_pair, seed=seed)
    except InvalidConfig as e:
        raise click.BadParameter(str(e)) from e

    click.echo(f"Filter: m={m} bits, k={k} ({source}), hash pair {hash_pair!r}", err=True)

    samples = words + random_probes(INDEPENDENCE_SAMPLES, exclude=words, seed=seed)
    try:
        independence = {"correlation": check_independence(hash_pair, samples), "passed": True}
    except InvalidConfig as e:
        logger.warning("Hash pair failed the independence check: %s", e)
        independence = {"correlation": h1_h2_correlation(hash_pair, samples), "passed": False}

    result = experiment.run(words, checkpoints=checkpoints)
    query_results: Dict[str, bool] = {q: experiment.bloom.might_contain(q.lower()) for q in queries}

    summary = {
        "words_file": words_file,
        "words": len(words),
        "duplicates_skipped": loader.num_duplicates,
        "sizing": {"m": m, "k": k, "source": source, "error_rate": error_rate if source == "derived" else None},
        "queries": query_results,
        "independence": independence,
        "experiment": result,
    }
    if held_out:
        summary["held_out"] = {
            "count": len(held_out),
            "observed_fp_rate": measure_false_positive_rate(experiment.bloom, held_out),
        }

    print(json.dumps(summary, ensure_ascii=False, indent=2))

    if plot_file:
        plot_false_positive_rate(result["snapshots"], title=f"m={m}, k={k}", save_path=plot_file)
        click.echo(f"Wrote chart to {plot_file}.", err=True)

    if result["false_negatives"]:
        logger.error("%d inserted words were rejected by the filter", result["false_negatives"])
        raise SystemExit(1)
    click.echo(f"Inserted {len(words)} words, observed FP rate {result['observed_fp_rate']:.4f}.", err=True)


if __name__ == "__main__":
    main()
