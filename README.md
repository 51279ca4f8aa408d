# strictjson

A strict JSON parser that reports exactly where and why input is wrong.

Every failure raises `strictjson.error.JsonError`. Each error carries a
one-based `line` and `column` and a category from `strictjson.error.Category`:
`SYNTAX`, `DATA`, `EOF` or `IO`. Numbers keep their integer or float nature.
Non-negative integers up to 2**64 - 1 and negative integers down to -2**63
stay `int`. Integers outside that range, and any number with a fraction or
exponent, come back as `float`. `-0` becomes `-0.0`. Numbers too large for a
float are an error, not infinity. Arrays and objects may be nested at most 127
levels deep unless you turn the limit off.

## Installing

```
pip install strictjson
```

## Parsing a whole document

```python
from strictjson.stream import from_str, from_slice, from_reader

from_str('{"a": [1, 2.5, true, null]}')   # {'a': [1, 2.5, True, None]}
from_slice(b'"text"')                      # 'text'

with open("data.json", "rb") as fh:
    value = from_reader(fh)
```

`from_reader` calls `reader.read()` once and parses what it returns. An
`OSError` raised while reading is wrapped in a `JsonError` of category `IO`.

If a key appears more than once in an object, its last value is kept.

Trailing non-whitespace after the value is an error:

```python
from strictjson.error import JsonError

try:
    from_str("[1] x")
except JsonError as err:
    print(err)                            # trailing characters at line 1 column 5
    print(err.line, err.column, err.classify())
```

`err.is_eof()` tells you that the input ended too early. `is_syntax()`,
`is_data()` and `is_io()` test for the other categories. `err.code` is the
specific `strictjson.error.ErrorCode`. `err.to_os_error()` converts the error
into an `OSError`.

## Streaming several values

```python
from strictjson.stream import iter_values

for value in iter_values('{"k": 3}1"cool""stuff" 3{}  [0, 1, 2]'):
    print(value)
```

Numbers and literals must be followed by whitespace, the end of the input or
one of `"[]{},:`. An error ends the iteration.

For finer control, wrap a `strictjson.de.Deserializer` in a
`strictjson.stream.StreamDeserializer`. Its `byte_offset()` tells you how many
bytes the values parsed so far have consumed. After an end-of-input error,
the unread data starts at that offset.

## Lower-level use

`strictjson.de.Deserializer` accepts `str` or bytes. It can also be built with
`from_str`, `from_slice` or `from_reader`. It has these typed entry points:

- `parse_value`
- `parse_bool`
- `parse_number_value`
- `parse_string`
- `parse_bytes`, which takes a string as raw bytes or an array of integers from 0 to 255
- `parse_null`
- `parse_array`
- `parse_object`
- `ignore_value`

Call `end()` to check that only whitespace remains. Call
`disable_recursion_limit()` to allow nesting of any depth.

`strictjson.numbers.parse_number("1e3")` parses a string that holds exactly one
JSON number.

`strictjson.scanner.Scanner` is the byte cursor underneath. It reads tokens and
strings and reports positions. `strictjson.position.LineColIterator` wraps any
iterable of bytes and counts lines, columns and the byte offset as it goes.

## What it does not do

strictjson only reads JSON. It has no encoder or serializer, no mapping of
JSON onto user-defined classes and no command-line tool. Every reader works
on input that is held fully in memory. `from_reader` reads the whole stream
before it parses anything.