"""Tests for the binary embedding codec."""

import struct

import numpy as np
import pytest

from hyperembed import (
    Embedding,
    InvalidDimensionError,
    MalformedBufferError,
    NullInputError,
    create_vector,
    decode_embeddings,
    encode_embeddings,
)
from hyperembed.storage.codec import HEADER_SIZE, decode_matrix, read_header


class TestEncode:
    def test_header_and_length(self):
        buffer = encode_embeddings([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]])
        assert isinstance(buffer, bytes)
        assert len(buffer) == HEADER_SIZE + 2 * 3 * 8
        assert struct.unpack_from("<II", buffer) == (2, 3)

    def test_values_are_little_endian_row_major(self):
        buffer = encode_embeddings([[1.0, 2.0], [3.0, 4.0]])
        values = struct.unpack_from("<4d", buffer, HEADER_SIZE)
        assert values == (1.0, 2.0, 3.0, 4.0)

    def test_empty(self):
        buffer = encode_embeddings([])
        assert buffer == struct.pack("<II", 0, 0)

    def test_empty_with_dimension(self):
        buffer = encode_embeddings([], dimension=5)
        assert read_header(buffer).dimension == 5

    def test_accepts_mixed_vector_types(self):
        vectors = [
            create_vector([0.1, 0.2]),
            Embedding(id="a", vector=(0.3, 0.4)),
            np.array([0.5, 0.6]),
            (0.7, 0.8),
        ]
        matrix = decode_matrix(encode_embeddings(vectors))
        np.testing.assert_array_equal(matrix, [[0.1, 0.2], [0.3, 0.4], [0.5, 0.6], [0.7, 0.8]])

    def test_accepts_2d_array(self):
        rows = np.arange(12, dtype=np.float64).reshape(4, 3)
        np.testing.assert_array_equal(decode_matrix(encode_embeddings(rows)), rows)

    def test_null_collection(self):
        with pytest.raises(NullInputError):
            encode_embeddings(None)

    def test_null_element(self):
        with pytest.raises(NullInputError) as exc_info:
            encode_embeddings([[0.1, 0.2], None])
        assert exc_info.value.node_index == 1

    def test_mixed_dimensions(self):
        with pytest.raises(InvalidDimensionError) as exc_info:
            encode_embeddings([[0.1, 0.2], [0.1, 0.2], [0.1, 0.2, 0.3]])
        assert exc_info.value.node_index == 2

    def test_too_small_dimension(self):
        with pytest.raises(InvalidDimensionError):
            encode_embeddings([[0.1]])

    def test_declared_dimension_mismatch(self):
        with pytest.raises(InvalidDimensionError):
            encode_embeddings([[0.1, 0.2]], dimension=3)


class TestDecode:
    def test_two_vectors_in_order(self):
        decoded = decode_embeddings(encode_embeddings([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]))
        assert [e.id for e in decoded] == [0, 1]
        assert decoded[0].vector == (0.1, 0.2, 0.3)
        assert decoded[1].vector == (0.4, 0.5, 0.6)

    def test_empty_round_trip(self):
        assert decode_embeddings(encode_embeddings([])) == []

    def test_large_collection_is_bit_exact(self):
        rows = np.random.default_rng(0).normal(size=(150, 8))
        decoded = decode_embeddings(encode_embeddings(rows))
        assert len(decoded) == 150
        assert np.array([e.vector for e in decoded]).tobytes() == rows.tobytes()

    def test_special_values_are_bit_exact(self):
        rows = np.array([[np.nan, np.inf], [-np.inf, -0.0], [5e-324, 1.7976931348623157e308]])
        matrix = decode_matrix(encode_embeddings(rows))
        assert matrix.tobytes() == rows.tobytes()

    def test_caller_ids(self):
        decoded = decode_embeddings(encode_embeddings([[0.1, 0.2], [0.3, 0.4]]), ids=["x", "y"])
        assert [e.id for e in decoded] == ["x", "y"]

    def test_ids_length_mismatch(self):
        with pytest.raises(ValueError):
            decode_embeddings(encode_embeddings([[0.1, 0.2]]), ids=["x", "y"])

    def test_decode_matrix_is_fresh_copy(self):
        buffer = encode_embeddings([[0.1, 0.2]])
        matrix = decode_matrix(buffer)
        assert matrix.flags.writeable
        matrix[0, 0] = 9.0
        assert decode_matrix(buffer)[0, 0] == 0.1

    def test_accepts_bytearray_and_memoryview(self):
        buffer = encode_embeddings([[0.1, 0.2]])
        assert decode_embeddings(bytearray(buffer))[0].vector == (0.1, 0.2)
        assert decode_embeddings(memoryview(buffer))[0].vector == (0.1, 0.2)

    def test_read_header(self):
        header = read_header(encode_embeddings([[0.1, 0.2, 0.3]] * 4))
        assert header.record_count == 4
        assert header.dimension == 3
        assert header.total_size == HEADER_SIZE + 4 * 3 * 8


class TestMalformedBuffers:
    def test_shorter_than_header(self):
        with pytest.raises(MalformedBufferError):
            decode_embeddings(b"\x00\x00\x00\x00")

    def test_truncated_body(self):
        buffer = encode_embeddings([[0.1, 0.2], [0.3, 0.4]])
        with pytest.raises(MalformedBufferError):
            decode_embeddings(buffer[:-1])

    def test_trailing_bytes(self):
        buffer = encode_embeddings([[0.1, 0.2]])
        with pytest.raises(MalformedBufferError):
            decode_embeddings(buffer + b"\x00")

    def test_declared_count_too_large(self):
        buffer = struct.pack("<II", 1000, 2) + b"\x00" * 16
        with pytest.raises(MalformedBufferError):
            decode_embeddings(buffer)

    def test_dimension_below_minimum(self):
        buffer = struct.pack("<II", 2, 1) + struct.pack("<2d", 0.1, 0.2)
        with pytest.raises(MalformedBufferError):
            decode_embeddings(buffer)

    def test_null_buffer(self):
        with pytest.raises(NullInputError):
            decode_embeddings(None)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            decode_embeddings(b"")
