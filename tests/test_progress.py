import io

from canvasserver.progress import RowProgress


class TtyBuffer(io.StringIO):
    def isatty(self):
        return True


def test_progress_renders_in_place():
    out = TtyBuffer()
    progress = RowProgress(4, "save image_1.bmp", out=out)
    progress.update(0)
    progress.update(1)
    progress.finish()
    text = out.getvalue()
    assert text.startswith("\rsave image_1.bmp [")
    assert text.endswith("] 2/4\n")


def test_progress_is_silent_off_tty():
    out = io.StringIO()
    progress = RowProgress(4, out=out)
    progress.update(3)
    progress.finish()
    assert out.getvalue() == ""
    assert progress.render().endswith("] 4/4")
