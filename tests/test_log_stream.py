"""
Incremental network log decoder tests
"""

import pytest

from tzrpc.core.log_stream import ObjectMemberDecoder
from tzrpc.exceptions import DecodeError


def decode_chunks(*chunks):
    """Feed every chunk then close, collecting the values produced."""
    decoder = ObjectMemberDecoder()
    values = []
    for chunk in chunks:
        values.extend(decoder.feed(chunk))
    values.extend(decoder.close())
    return values


class TestWholeDocument:
    """Bodies received in a single chunk."""

    def test_empty_object(self):
        assert decode_chunks("{}") == []

    def test_values_in_order(self):
        body = '{"b": 1, "a": "two", "c": [3, {"x": null}], "d": true, "e": {"f": -1.5e3}}'
        assert decode_chunks(body) == [1, "two", [3, {"x": None}], True, {"f": -1500.0}]

    def test_whitespace_everywhere(self):
        assert decode_chunks(' \n{ "a" :\t1 ,\r\n "b" : false }\n') == [1, False]

    def test_strings_with_braces_and_escapes(self):
        body = r'{"a": "}{][", "b": {"msg": "say \"hi\" \\", "n": 1}}'
        assert decode_chunks(body) == ["}{][", {"msg": 'say "hi" \\', "n": 1}]

    def test_duplicate_names_kept(self):
        assert decode_chunks('{"entry": 1, "entry": 2}') == [1, 2]

    def test_trailing_data_ignored(self):
        decoder = ObjectMemberDecoder()
        assert list(decoder.feed('{"a": 1} garbage')) == [1]
        assert decoder.finished


class TestChunked:
    """Values split over several reads."""

    def test_value_held_until_complete(self):
        decoder = ObjectMemberDecoder()
        assert list(decoder.feed('{"a": {"peer": "id')) == []
        assert list(decoder.feed('x"}, "b"')) == [{"peer": "idx"}]
        assert list(decoder.feed(": [1,")) == []
        assert list(decoder.feed(" 2]}")) == [[1, 2]]
        assert decoder.finished

    def test_number_waits_for_delimiter(self):
        decoder = ObjectMemberDecoder()
        assert list(decoder.feed('{"a": 12')) == []
        assert list(decoder.feed("34")) == []
        assert list(decoder.feed(" ")) == [1234]

    def test_one_character_at_a_time(self):
        body = '{"a": {"k": [1, "x,y"]}, "b": null, "c": 7}'
        assert decode_chunks(*body) == [{"k": [1, "x,y"]}, None, 7]

    def test_escaped_quote_split(self):
        assert decode_chunks('{"a": "x\\', '"y"}') == ['x"y']


class TestErrors:
    """Malformed bodies."""

    def test_not_an_object(self):
        with pytest.raises(DecodeError, match="expected object"):
            decode_chunks("[1, 2]")

    def test_scalar_body(self):
        with pytest.raises(DecodeError, match="expected object"):
            decode_chunks("42")

    def test_empty_body(self):
        with pytest.raises(DecodeError, match="unexpected end"):
            decode_chunks("")

    def test_unclosed_object(self):
        with pytest.raises(DecodeError, match="unexpected end"):
            decode_chunks('{"a": 1', ', "b": 2')

    def test_number_at_end_of_unclosed_object(self):
        """The last value is still delivered before the error."""
        decoder = ObjectMemberDecoder()
        assert list(decoder.feed('{"a": 5')) == []

        values = []
        with pytest.raises(DecodeError):
            for value in decoder.close():
                values.append(value)
        assert values == [5]

    def test_invalid_value_after_valid_ones(self):
        decoder = ObjectMemberDecoder()
        values = []
        with pytest.raises(DecodeError):
            for value in decoder.feed('{"a": 1, "b": nul, "c": 3}'):
                values.append(value)
        assert values == [1]

    def test_missing_colon(self):
        with pytest.raises(DecodeError, match="':'"):
            decode_chunks('{"a" 1}')

    def test_unquoted_name(self):
        with pytest.raises(DecodeError, match="member name"):
            decode_chunks("{a: 1}")

    def test_trailing_comma(self):
        with pytest.raises(DecodeError, match="member name"):
            decode_chunks('{"a": 1,}')

    def test_missing_separator(self):
        with pytest.raises(DecodeError):
            decode_chunks('{"a": [1] "b": 2}')

    def test_missing_value(self):
        with pytest.raises(DecodeError):
            decode_chunks('{"a": , "b": 2}')
