"""
Tests for the command line interface.
"""

import pytest

from toyasm.__main__ import main
from toyasm.objfile import ObjectFormat, pack_words


PROGRAM = "addi x1, x0, 10\nbne x3, x2, -8\nhalt\n"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "prog.asm").write_text(PROGRAM)
    return tmp_path


class TestAsmCommand:
    def test_default_outputs(self, workdir, capsys):
        assert main(["asm", "prog.asm"]) == 0
        obj = workdir / "out" / "prog.o"
        txt = workdir / "out" / "prog.txt"
        assert obj.read_bytes() == pack_words([0x000A0042, 0xFFE31603, 0])
        assert txt.read_text().splitlines() == [
            "0b00000000000_01010_00000_00001_000010",
            "0b11111111111_00011_00010_11000_000011",
            "0b00000000000_00000_00000_00000_000000",
        ]
        assert "Assembly successful: 3 instructions" in capsys.readouterr().out

    def test_explicit_output_and_format(self, workdir):
        assert main(["asm", "prog.asm", "-o", "prog.bin", "--format", "legacy"]) == 0
        data = (workdir / "prog.bin").read_bytes()
        assert data == pack_words([0x000A0042, 0xFFE31603, 0], ObjectFormat.LEGACY)
        assert not (workdir / "out").exists()

    def test_config_file(self, workdir):
        (workdir / "toyasm.yaml").write_text("output_dir: build\nwrite_text_dump: false\n")
        assert main(["asm", "prog.asm"]) == 0
        assert (workdir / "build" / "prog.o").exists()
        assert not (workdir / "build" / "prog.txt").exists()

    def test_listing(self, workdir, capsys):
        assert main(["asm", "prog.asm", "-o", "prog.o", "-l"]) == 0
        assert "0x0004:   FFE31603   bne x3, x2, -8" in capsys.readouterr().out

    def test_syntax_error(self, workdir, capsys):
        (workdir / "bad.asm").write_text("addi x1, x0, 1\nfoo x1\n")
        assert main(["asm", "bad.asm"]) == 1
        err = capsys.readouterr().err
        assert "Line 2: Unrecognized instruction: foo" in err
        assert not (workdir / "out" / "bad.o").exists()

    def test_missing_input(self, workdir, capsys):
        assert main(["asm", "nope.asm"]) == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_bad_config(self, workdir, capsys):
        (workdir / "bad.yaml").write_text("colour: red\n")
        assert main(["asm", "prog.asm", "-c", "bad.yaml"]) == 1
        assert "Unknown configuration key" in capsys.readouterr().err


class TestDisasmCommand:
    def test_listing(self, workdir, capsys):
        (workdir / "prog.o").write_bytes(pack_words([0x000A0042, 0x3F, 0]))
        assert main(["disasm", "prog.o"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "00000000: 000A0042  addi x1, x0, 10",
            "00000004: 0000003F  unknown 0x0000003F",
            "00000008: 00000000  halt",
        ]

    def test_legacy_bad_magic(self, workdir, capsys):
        (workdir / "prog.o").write_bytes(pack_words([0x000A0042, 0]))
        assert main(["disasm", "prog.o", "-f", "legacy"]) == 1
        assert "Bad magic number" in capsys.readouterr().err


class TestVerifyCommand:
    def test_match(self, workdir, capsys):
        main(["asm", "prog.asm"])
        capsys.readouterr()
        assert main(["verify", "out/prog.o", "out/prog.txt"]) == 0
        assert "3 of 3 instructions match" in capsys.readouterr().out

    def test_mismatch(self, workdir, capsys):
        (workdir / "prog.o").write_bytes(pack_words([1]))
        (workdir / "expected.txt").write_text("0b00000000000_00000_00000_00000_000000\n")
        assert main(["verify", "prog.o", "expected.txt"]) == 1
        assert "0 of 1 instructions match" in capsys.readouterr().out
