"""Result-returning domain helpers shared by the test modules."""

from okflow import Err, Ok


def safe_div(a, b):
    if b == 0:
        return Err('zero_division')
    return Ok(a / b)


def fetch_key(data, key):
    if key in data:
        return Ok(data[key])
    return Err(('key_not_found', key))


def good(value):
    return Ok(value)


def invalid(value):
    return ('bad', value)


def bar(a):
    return ('bad', a)
