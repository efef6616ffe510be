from importlib.metadata import PackageNotFoundError

from hlsproxy import _version as ver


def test_get_version_reads_version_file():
    expected = ver._VERSION_FILE.read_text(encoding="utf-8").strip()

    assert ver.get_version() == expected
    assert ver.__version__ == expected


def test_get_version_uses_distribution_metadata(monkeypatch, tmp_path):
    monkeypatch.setattr(ver, "_VERSION_FILE", tmp_path / "VERSION")
    monkeypatch.setattr(ver, "_dist_version", lambda name: "9.9.9" if name == "hlsproxy" else "")

    assert ver.get_version() == "9.9.9"


def test_blank_version_file_falls_through_to_metadata(monkeypatch, tmp_path):
    blank = tmp_path / "VERSION"
    blank.write_text("  \n", encoding="utf-8")
    monkeypatch.setattr(ver, "_VERSION_FILE", blank)
    monkeypatch.setattr(ver, "_dist_version", lambda name: "1.2.3")

    assert ver.get_version() == "1.2.3"


def test_get_version_fallback_when_not_installed(monkeypatch, tmp_path):
    def _missing(name):
        raise PackageNotFoundError(name)

    monkeypatch.setattr(ver, "_VERSION_FILE", tmp_path / "VERSION")
    monkeypatch.setattr(ver, "_dist_version", _missing)

    assert ver.get_version() == ver.UNKNOWN_VERSION
