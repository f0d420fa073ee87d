"""Text and image helpers: CSV, MPS, PNG data URIs and pretty printing."""

from .csv import parse_csv, to_csv
from .mps import MPSProblem, parse_mps
from .png import encode_png, image_url
from .pretty import pretty_print

__all__ = [
    "parse_csv",
    "to_csv",
    "MPSProblem",
    "parse_mps",
    "encode_png",
    "image_url",
    "pretty_print",
]
