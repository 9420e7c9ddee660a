#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    Callable,
    Iterator,
    List,
    Tuple,
    TypeVar,
)

import functools
import itertools
import logging
import time

log = logging.getLogger(__name__)

T = TypeVar("T")


def timeit(func: Callable) -> Callable:
    """
    Decorator for measuring a function's running time

    :param func: function
    :return:
    """
    @functools.wraps(func)
    def measure_time(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        elapsed = time.time() - start_time
        log.info(f"Processing time of '{func.__qualname__}()': {elapsed:.4f} seconds.")
        return result

    return measure_time


def bundled(a: List[T], key: Callable = lambda x: x) -> List[List[T]]:
    """
    Group consecutive list elements with the same key

    Note: the source list needs be sorted on the same key function

    Example:
    [1, 1, 2, 3, 3] -> [[1, 1], [2], [3, 3]]

    :param a: source list
    :param key: function to extract comparison key
    :return:
    """
    return [list(g) for k, g in itertools.groupby(a, key=key)]


def intervaled(start: int, stop: int, size: int) -> Iterator[Tuple[int, int]]:
    """
    Yield successive evenly-sized intervals from a given range

    Example:
    (1, 10, 4) -> (1, 4), (5, 8), (9, 10)

    :param start: first element
    :param stop: last element (included)
    :param size: chunk size
    :return:
    """
    assert size > 0

    it = start
    while it <= stop:
        yield it, min(stop, it + size - 1)
        it += size
