"""Tests for the hyperembed command-line interface."""

import json

import numpy as np
import pytest

from hyperembed.cli import main, parse_coords
from hyperembed.storage.codec import decode_matrix, encode_embeddings, read_header


def parse_output(text):
    return [float(v) for v in text.strip().split(",")]


class TestGeometryCommands:
    def test_project(self, capsys):
        assert main(["project", "0.5,0.0"]) == 0
        np.testing.assert_allclose(parse_output(capsys.readouterr().out), [5 / 3, 4 / 3, 0.0])

    def test_unproject(self, capsys):
        assert main(["unproject", "1.2,0.3,0.4,0.5"]) == 0
        np.testing.assert_allclose(
            parse_output(capsys.readouterr().out), np.array([0.3, 0.4, 0.5]) / 2.2
        )

    def test_distance_poincare(self, capsys):
        assert main(["distance", "0.0,0.0", "0.5,0.0", "--poincare"]) == 0
        assert float(capsys.readouterr().out) == pytest.approx(2 * np.arctanh(0.5))

    def test_distance_lorentz(self, capsys):
        assert main(["distance", "1,0,0", "1,0,0"]) == 0
        assert float(capsys.readouterr().out) == 0.0

    def test_out_of_range_exits_non_zero(self, capsys):
        assert main(["project", "2.0,1.5,1.0"]) == 1
        assert "outside valid hyperbolic range" in capsys.readouterr().err

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_parse_coords(self):
        assert parse_coords("0.1, -0.2,") == [0.1, -0.2]


class TestCodecCommands:
    def test_encode_decode(self, tmp_path, capsys):
        vectors = [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]
        source = tmp_path / "vectors.json"
        source.write_text(json.dumps(vectors))
        binary = tmp_path / "vectors.bin"
        result = tmp_path / "decoded.json"

        assert main(["encode", str(source), str(binary)]) == 0
        assert binary.read_bytes() == encode_embeddings(vectors)
        assert main(["decode", str(binary), "-o", str(result)]) == 0
        assert json.loads(result.read_text()) == vectors

    def test_decode_to_stdout(self, tmp_path, capsys):
        binary = tmp_path / "vectors.bin"
        binary.write_bytes(encode_embeddings([[1.0, 2.0]]))
        assert main(["decode", str(binary)]) == 0
        assert json.loads(capsys.readouterr().out) == [[1.0, 2.0]]

    def test_decode_malformed(self, tmp_path, capsys):
        binary = tmp_path / "broken.bin"
        binary.write_bytes(b"\x01\x00")
        assert main(["decode", str(binary)]) == 1
        assert "Error" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["decode", str(tmp_path / "missing.bin")]) == 1


class TestEmbedCommand:
    def test_embed_graph(self, tmp_path, capsys):
        graph = {"nodes": [[0.1 * i, 0.05] for i in range(10)], "edges": [[0, 1], [1, 2]]}
        source = tmp_path / "graph.json"
        source.write_text(json.dumps(graph))
        output = tmp_path / "points.bin"

        assert main(["embed", str(source), str(output), "--batch-size", "4"]) == 0
        buffer = output.read_bytes()
        header = read_header(buffer)
        assert (header.record_count, header.dimension) == (10, 3)
        points = decode_matrix(buffer)
        assert np.all(points[:, 0] >= 1.0)

    def test_embed_reports_bad_node(self, tmp_path, capsys):
        source = tmp_path / "graph.json"
        source.write_text(json.dumps({"nodes": [[0.1, 0.1], [1.0, 1.0]], "edges": []}))
        assert main(["embed", str(source), str(tmp_path / "out.bin")]) == 1
        assert "node 1" in capsys.readouterr().err
