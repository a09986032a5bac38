from bitcrush.utils import capture_output, error, log


def test_capture_output_keeps_errors_in_the_block(capsys):
    with capture_output() as buf:
        log("=== a.png ===")
        error("a.png: broken")
    assert buf.getvalue() == "=== a.png ===\n[error] a.png: broken\n"
    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""


def test_error_goes_to_stderr_outside_capture(capsys):
    error("boom")
    captured = capsys.readouterr()
    assert captured.err == "[error] boom\n"
    assert captured.out == ""
