"""
Tests for code generation and the Assembler facade.
"""

import pytest

from chip8asm import Assembler, GeneratorContext, generate, parse, tokenize
from chip8asm.errors import EncodingError, SymbolError


def compile_source(source):
    return generate(parse(tokenize(source)))


class TestGenerate:
    """Tests for the single-pass generator."""

    def test_assignments(self):
        """Test a two-line program."""
        assert compile_source("v0 = 5\r\nv1 = v0\r\n") == bytes([0x60, 0x05, 0x81, 0x00])

    def test_backward_goto(self):
        """Test a label on the first line binds to pc 2."""
        output = compile_source("loop:\r\nclear\r\ngoto loop\r\n")
        assert output == bytes([0x00, 0xE0, 0x10, 0x00])

    def test_clear_independent_of_position(self):
        output = compile_source("v0 = 1\r\nx:\r\nclear\r\n")
        assert output[2:] == bytes([0x00, 0xE0])

    def test_every_form(self):
        """Test one program using all statement forms."""
        source = (
            "clear\r\n"
            "v1 = v2\r\n"
            "v3 = 0x20\r\n"
            "i = 0x234\r\n"
            "i = *v4\r\n"
            "top:\r\n"
            "draw v5 v6 7\r\n"
            "v8 += 1\r\n"
            "goto top\r\n"
        )
        assert compile_source(source).hex() == "00e0" "8120" "6320" "d234" "f429" "d567" "7801" "100a"

    def test_length_matches_statements(self):
        """Test two bytes per non-label statement."""
        source = "a:\r\nclear\r\nb:\r\nv0 = 1\r\nc:\r\ngoto a\r\n"
        program = parse(tokenize(source))
        non_labels = sum(1 for s in program if type(s).__name__ != "DeclareLabel")
        assert len(generate(program)) == 2 * non_labels == 6

    def test_label_takes_no_slot(self):
        """Test a label binds to the slot of the next statement."""
        ctx = GeneratorContext()
        output = generate(parse(tokenize("clear\r\nhere:\r\nclear\r\ngoto here\r\n")), ctx)
        assert ctx.labels == {"here": 4}
        assert ctx.pc == 6
        assert output[4:] == bytes([0x10, 0x02])

    def test_redeclared_label_overwrites(self):
        """Test the latest declaration wins."""
        ctx = GeneratorContext()
        output = generate(parse(tokenize("a:\r\nclear\r\na:\r\ngoto a\r\n")), ctx)
        assert ctx.labels["a"] == 4
        assert output[2:] == bytes([0x10, 0x02])

    def test_forward_reference_unresolved(self):
        """Test a jump to a later label fails in a single pass."""
        with pytest.raises(SymbolError) as exc_info:
            compile_source("goto end\r\nend:\r\n")
        assert exc_info.value.label == "end"
        assert exc_info.value.line_num == 1

    def test_unresolved_label_line_number(self):
        """Test the reported line counts blank lines."""
        with pytest.raises(SymbolError, match="Line 3") as exc_info:
            compile_source("clear\r\n\r\ngoto nowhere\r\n")
        assert exc_info.value.line_num == 3

    def test_draw_height_above_nibble(self):
        """Test heights past 15 compile as long as the byte fits."""
        output = compile_source("draw v0 v1 4\r\ndraw v0 v0 20\r\n")
        assert output == bytes([0xD0, 0x14, 0xD0, 0x14])

    def test_draw_overflow_error_has_line(self):
        with pytest.raises(EncodingError) as exc_info:
            compile_source("clear\r\ndraw v0 vf 16\r\n")
        assert exc_info.value.line_num == 2
        assert isinstance(exc_info.value.__cause__, EncodingError)

    def test_runs_are_independent(self):
        """Test labels from one run are not visible in the next."""
        compile_source("loop:\r\nclear\r\n")
        with pytest.raises(SymbolError):
            compile_source("goto loop\r\n")

    def test_log_callback(self):
        lines = []
        generate(parse(tokenize("loop:\r\nclear\r\n")), log=lines.append)
        assert lines[0] == "  Label 'loop' at 0x0002"
        assert "00E0" in lines[1]


class TestAssembler:
    """Tests for the Assembler facade."""

    def test_assemble_string(self):
        asm = Assembler()
        assert asm.assemble_string("v0 = 5\r\nv1 = v0\r\n") == bytes([0x60, 0x05, 0x81, 0x00])
        assert asm.instruction_count == 2

    def test_hex_string(self):
        asm = Assembler()
        asm.assemble_string("v0 = 5\r\nv1 = v0\r\n")
        assert asm.get_hex_string() == "6005\n8100"

    def test_listing(self):
        asm = Assembler()
        asm.assemble_string("loop:\r\nv0 = 5\r\ngoto loop\r\n")
        listing = asm.get_listing().splitlines()
        assert listing[0].startswith("Address")
        assert listing[2] == "0x0000:   6005   v0 = 5"
        assert listing[3] == "0x0002:   1000   goto loop"

    def test_assemble_file(self, tmp_path):
        """Test file round trip keeps \\r\\n line breaks."""
        src = tmp_path / "prog.c8s"
        out = tmp_path / "prog.ch8"
        src.write_bytes(b"loop:\r\nclear\r\ngoto loop\r\n")

        asm = Assembler()
        asm.assemble_file(str(src), str(out))

        assert out.read_bytes() == bytes([0x00, 0xE0, 0x10, 0x00])
        assert asm.labels == {"loop": 2}

    def test_verbose(self, capsys):
        asm = Assembler(verbose=True)
        asm.assemble_string("loop:\r\nclear\r\n")
        captured = capsys.readouterr().out
        assert "Label 'loop' at 0x0002" in captured
        assert "Total instructions: 1" in captured

    def test_quiet(self, capsys):
        Assembler().assemble_string("clear\r\n")
        assert capsys.readouterr().out == ""
