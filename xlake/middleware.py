#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    Any,
    Callable,
    Generator,
    Optional,
    TypeVar,
    Union,
)

import time
import logging
import email.utils

from requests.exceptions import (
    ConnectionError,
    HTTPError,
    Timeout,
    TooManyRedirects,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

RETRY_EXCEPTIONS = (ConnectionError, HTTPError, Timeout, TooManyRedirects)


def _parse_retry_after(value: Union[str, int]) -> int:
    """
    Determine a delay time in seconds from a Retry-After header of a HTTP 429.
    In case of an error or a negative value, 0 is returned.

    See https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/Retry-After

    :param value: Retry-After header entry
    :return: number of seconds to sleep
    """
    try:
        return max(0, int(value))
    except ValueError:
        pass

    try:
        t = email.utils.parsedate_to_datetime(value)
        delay = int(t.timestamp() - time.time())
        return max(0, delay)
    except (TypeError, ValueError):
        pass

    return 0


def _backoff(
    base: int = 2,
    factor: int = 1,
    max_value: Optional[int] = None
) -> Generator[int, Any, None]:
    """
    Generator for exponential growth.

    Taken from https://github.com/litl/backoff

    :param base: The mathematical base of the exponentiation operation
    :param factor: Factor to multiply the exponentiation by.
    :param max_value: The maximum value to yield. Once the value in the true exponential
        sequence exceeds this, the value of max_value will forever after be yielded.
    :return:
    """
    n = 0
    while True:
        a = factor * base ** n
        if max_value is None or a < max_value:
            yield a
            n += 1
        else:
            yield max_value


def http_backoff_retry_request(
    make_request: Callable[..., T],
    retries: int = 5,
    max_delay: int = 60,
    sleep: Optional[Callable[[float], None]] = None,
) -> Callable[..., T]:
    """
    Wrap a HTTP request function so that failed requests are retried with an exponential backoff.
    Additionally, the wrapper tries to honor HTTP 429 (Too Many Requests) headers.

    The wrapped function is expected to raise the ``requests`` exceptions (e.g. by calling
    ``raise_for_status()``). The last error is re-raised once all retries are used up.

    :param make_request: function performing the request
    :param retries: max number of attempts
    :param max_delay: max sleep delay in seconds
    :param sleep: sleep function (defaults to ``time.sleep``)
    :return:
    """
    assert retries > 0

    def wrapper(*args, **kwargs) -> T:
        delay_gen = _backoff(max_value=max_delay)
        for i in range(retries):
            try:
                return make_request(*args, **kwargs)
            except RETRY_EXCEPTIONS as e:
                if i >= retries - 1:
                    raise

                # check for specific 429 HTTPError
                retry_after = 0
                response = getattr(e, "response", None)
                if response is not None and response.status_code == 429:
                    retry_after = _parse_retry_after(response.headers.get("Retry-After", 0))
                    log.warning(f"Encountered rate limiting (retry-after: {retry_after}s)")

                # exponential backoff (retry_after has precedence)
                delay = max(next(delay_gen), min(retry_after, max_delay))
                log.debug(f"HTTP request retry {i + 1}/{retries - 1} backoff: {delay}s ({e})")
                (sleep or time.sleep)(delay)
        return None

    return wrapper
