import httpx
from PIL import Image

import mosaic.cli as cli
import mosaic.engine as engine_module
from mosaic.errors import EncodingError
from mosaic.fetch import ImageFetcher


def _write(tmp_path, name, size, color=(255, 0, 0)):
    path = tmp_path / name
    Image.new("RGB", size, color).save(path)
    return str(path)


def test_render_writes_mosaic(tmp_path, capsys):
    a = _write(tmp_path, "a.png", (40, 20))
    b = _write(tmp_path, "b.png", (20, 20), (0, 0, 255))
    out = tmp_path / "out" / "mosaic.png"
    code = cli.main(["render", a, b, "-o", str(out), "--blur-radius", "3"])
    assert code == cli.EXIT_OK
    assert Image.open(out).size == (80, 20)
    assert "80x20" in capsys.readouterr().out


def test_render_too_many_files_is_a_usage_error(tmp_path):
    files = [_write(tmp_path, f"{i}.png", (10, 10)) for i in range(5)]
    out = tmp_path / "mosaic.png"
    assert cli.main(["render", *files, "-o", str(out)]) == cli.EXIT_USAGE
    assert not out.exists()


def test_render_missing_file_is_a_usage_error(tmp_path):
    assert cli.main(["render", str(tmp_path / "nope.png"), "-o", str(tmp_path / "o.png")]) == cli.EXIT_USAGE


def test_internal_error_exit_code(tmp_path, monkeypatch):
    def _fail(*args, **kwargs):
        raise EncodingError("boom")

    monkeypatch.setattr(engine_module, "finalize", _fail)
    a = _write(tmp_path, "a.png", (10, 10))
    assert cli.main(["render", a, "-o", str(tmp_path / "o.png")]) == cli.EXIT_INTERNAL


def test_fetch_command_without_images_is_a_usage_error(tmp_path, monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    monkeypatch.setattr(cli, "ImageFetcher", lambda config: ImageFetcher(config, client=httpx.Client(transport=transport)))
    code = cli.main(["fetch", "did:plc:abc123", "x", "y", "-o", str(tmp_path / "o.png")])
    assert code == cli.EXIT_USAGE
