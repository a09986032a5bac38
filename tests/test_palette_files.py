import pytest

from bitcrush.palette_data import (
    BUILTIN_PALETTES,
    DEFAULT_PALETTE_NAME,
    ColorPalette,
    find_palette,
    palette_names,
)
from bitcrush.palette_files import (
    load_palette_file,
    load_palettes_from_dir,
    parse_gpl,
    parse_hex_list,
)

GPL_TEXT = """GIMP Palette
Name: ignored header key
Columns: 4
# Palette Name: Sunrise
# a comment
255   0   0  Red
  0 255   0
12.6 300 -5  Rounded and clamped
not a row
1 2
"""


def test_parse_gpl():
    pal = parse_gpl(GPL_TEXT, "fallback")
    assert pal.name == "Sunrise"
    assert pal.colors == ("#ff0000", "#00ff00", "#0dff00")


def test_parse_gpl_uses_fallback_name():
    pal = parse_gpl("GIMP Palette\n0 0 0\n", "mine")
    assert pal.name == "mine"
    assert pal.colors == ("#000000",)


def test_parse_gpl_rejects_missing_header():
    with pytest.raises(ValueError, match="Not a GIMP palette file"):
        parse_gpl("0 0 0\n", "x")
    with pytest.raises(ValueError):
        parse_gpl("", "x")


def test_parse_hex_list():
    pal = parse_hex_list("#FF0000\n00ff00\n\ngarbage\n#12345\n  abcdef  \n", "hexes")
    assert pal.name == "hexes"
    assert pal.colors == ("#ff0000", "#00ff00", "#abcdef")


def test_load_palette_file_dispatches_on_suffix(tmp_path):
    path = tmp_path / "Duo.HEX"
    path.write_text("000000\nffffff\n", encoding="utf-8")
    pal = load_palette_file(path)
    assert pal.name == "Duo" and len(pal) == 2

    other = tmp_path / "x.txt"
    other.write_text("000000\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_palette_file(other)


def test_load_palette_file_keeps_undecodable_bytes_visible(tmp_path):
    path = tmp_path / "latin.gpl"
    path.write_bytes(b"GIMP Palette\n# Palette Name: Caf\xe9\n1 2 3\n")
    pal = load_palette_file(path)
    assert pal.name == "Caf\ufffd"
    assert pal.colors == ("#010203",)


def test_load_palettes_from_dir(tmp_path, capsys):
    (tmp_path / "b.gpl").write_text("GIMP Palette\n# Palette Name: Bee\n1 2 3\n", encoding="utf-8")
    (tmp_path / "A.hex").write_text("#010101\n", encoding="utf-8")
    (tmp_path / "bad.gpl").write_text("nope\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("000000\n", encoding="utf-8")
    (tmp_path / "sub.gpl").mkdir()

    pals = load_palettes_from_dir(tmp_path)

    assert [p.name for p in pals] == ["A", "Bee"]
    assert "[warn] skipped palette bad.gpl" in capsys.readouterr().out


def test_load_palettes_from_missing_dir(tmp_path):
    assert load_palettes_from_dir(tmp_path / "missing") == []


def test_builtin_table():
    names = palette_names()
    assert names[0] == DEFAULT_PALETTE_NAME == "Flying Tiger"
    assert "Gameboy" in names and "Black & White" in names
    assert all(len(p) > 0 for p in BUILTIN_PALETTES)
    assert find_palette("Gameboy").colors == ("#0f380f", "#306230", "#8bac0f", "#9bbc0f")


def test_find_palette_case_insensitive_and_shadowing():
    assert find_palette("  black & WHITE ").name == "Black & White"
    custom = ColorPalette("Gameboy", ["#000000"])
    assert find_palette("gameboy", extra=[custom]) is custom
    assert palette_names([custom])[-1] == "Gameboy"
    with pytest.raises(KeyError):
        find_palette("No Such Palette")


def test_color_palette_is_immutable():
    pal = ColorPalette("x", ["#000000"])
    assert isinstance(pal.colors, tuple)
    with pytest.raises(AttributeError):
        pal.name = "y"
