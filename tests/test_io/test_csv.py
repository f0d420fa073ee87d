"""Tests for CSV parsing and formatting."""

import numpy as np
import pytest

from pynumeric.io import parse_csv, to_csv


def test_parse_numbers():
    assert parse_csv("1,2,3\n4,5.5,-6e2\n") == [[1.0, 2.0, 3.0], [4.0, 5.5, -600.0]]


def test_parse_quoted_fields_stay_strings():
    rows = parse_csv('a,"b,c",\'12\',3\n')
    assert rows == [["a", "b,c", "12", 3.0]]


def test_parse_skips_blank_lines():
    assert parse_csv("1,2\n\n3,4\n\n") == [[1.0, 2.0], [3.0, 4.0]]


def test_parse_keeps_empty_fields():
    assert parse_csv("1,,3") == [[1.0, "", 3.0]]


def test_to_csv_matrix():
    assert to_csv(np.array([[1.0, 2.5], [3.0, 4.0]])) == "1,2.5\n3,4\n"


def test_to_csv_mixed_rows_quotes_when_needed():
    text = to_csv([["name", "value"], ["b,c", 2], ["12", 0.25]])
    assert text == 'name,value\n"b,c",2\n"12",0.25\n'
    assert parse_csv(text) == [["name", "value"], ["b,c", 2.0], ["12", 0.25]]


def test_to_csv_uses_single_quotes_around_double_quotes():
    assert to_csv([['say "hi"']]) == "'say \"hi\"'\n"


def test_to_csv_rejects_unrepresentable_fields():
    with pytest.raises(ValueError):
        to_csv([["two\nlines"]])
    with pytest.raises(ValueError):
        to_csv([["it's \"x\""]])
