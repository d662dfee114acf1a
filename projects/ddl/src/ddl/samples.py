"""Bundled sample schemas."""

from collections.abc import Iterable
from pathlib import Path
from tomllib import load
from typing import TypedDict


class Sample(TypedDict):
    """A starter schema."""

    id: str
    name: str
    description: str
    sql: str


type Samples = Iterable[Sample]

SAMPLE_FILE = Path(__file__).parent / "samples.toml"


def get_samples() -> list[Sample]:
    """Load samples from the bundled catalogue."""
    with SAMPLE_FILE.open("rb") as f:
        samples: list[Sample] = load(f)["samples"]
        return samples


def get_sample(sample_id: str, samples: Samples | None = None) -> Sample:
    """Get a sample by id."""
    for sample in get_samples() if samples is None else samples:
        if sample["id"] == sample_id:
            return sample
    msg = f"Unknown sample: {sample_id}"
    raise ValueError(msg)
