import numpy as np
import pytest
from PIL import Image

import pixelize as cli


def _write_image(path, size=(40, 30), seed=0):
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
    Image.fromarray(arr).save(path)
    return path


def test_single_file(tmp_path, capsys):
    src = _write_image(tmp_path / "photo.png")

    code = cli.main(
        [str(src), "--grid", "8", "--palette", "black & white", "--algorithm", "bayer", "--base"]
    )

    assert code == 0
    preview = tmp_path / "photo-pixelized-bayer-8x8-black-&-white.png"
    base = tmp_path / "photo-pixelized-base-bayer-8x8-black-&-white.png"
    assert Image.open(preview).size == (640, 640)
    assert Image.open(base).size == (8, 8)
    out = capsys.readouterr().out
    assert "[run] Grid: 8  Palette: Black & White  Algorithm: Bayer" in out
    assert f"Wrote {preview.name}" in out
    assert "Colours used:" in out


def test_no_upscale_and_outdir(tmp_path):
    src = _write_image(tmp_path / "in.png")
    outdir = tmp_path / "out"
    code = cli.main([str(src), "--grid", "16", "--no-upscale", "--outdir", str(outdir)])
    assert code == 0
    written = outdir / "in-pixelized-standard-16x16-flying-tiger.png"
    assert Image.open(written).size == (16, 16)


def test_folder_mode_skips_outputs_and_reports_failures(tmp_path, capsys):
    _write_image(tmp_path / "a.png", seed=1)
    _write_image(tmp_path / "b.jpg", seed=2)
    _write_image(tmp_path / "a-pixelized-standard-8x8-gameboy.png", seed=3)
    (tmp_path / "broken.png").write_bytes(b"not an image")

    code = cli.main([str(tmp_path), "--grid", "8", "--palette", "Gameboy", "--jobs", "2"])

    assert code == 1
    out = capsys.readouterr().out
    # captured jobs keep their error line inside their own block
    assert out.index("=== broken.png ===") < out.index("[error] broken.png")
    assert (tmp_path / "b-pixelized-standard-8x8-gameboy.png").exists()
    assert not (tmp_path / "a-pixelized-standard-8x8-gameboy-pixelized-standard-8x8-gameboy.png").exists()
    assert out.index("=== a.png ===") < out.index("=== b.jpg ===") < out.index("=== broken.png ===")


def test_palette_dir(tmp_path):
    pal_dir = tmp_path / "palettes"
    pal_dir.mkdir()
    (pal_dir / "duo.gpl").write_text(
        "GIMP Palette\n# Palette Name: Duo Tone\n255 0 0\n0 0 255\n", encoding="utf-8"
    )
    src = _write_image(tmp_path / "x.png")
    code = cli.main(
        [str(src), "--grid", "8", "--palette-dir", str(pal_dir), "--palette", "duo tone", "--no-upscale"]
    )
    assert code == 0
    out = np.array(Image.open(tmp_path / "x-pixelized-standard-8x8-duo-tone.png"))
    colours = {tuple(c) for c in out[..., :3].reshape(-1, 3).tolist()}
    assert colours <= {(255, 0, 0), (0, 0, 255)}


def test_list(capsys):
    assert cli.main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "Gameboy" in out
    assert "Randomized Selective" in out


def test_argument_errors(tmp_path, capsys):
    src = _write_image(tmp_path / "x.png")
    assert cli.main([str(src), "--palette", "Nope"]) == 2
    assert cli.main([str(src), "--algorithm", "Sharpen"]) == 2
    assert cli.main([str(tmp_path / "missing.png")]) == 2
    err = capsys.readouterr().err
    assert "unknown palette: Nope" in err
    assert 'Algorithm "Sharpen" not found' in err

    with pytest.raises(SystemExit) as exc:
        cli.main([str(src), "--grid", "10"])
    assert exc.value.code == 2
    with pytest.raises(SystemExit):
        cli.main([])
