from pathlib import Path


def _hide_version_file(monkeypatch):
    real_exists = Path.exists
    monkeypatch.setattr(
        Path, "exists", lambda self: False if self.name == "VERSION" else real_exists(self)
    )


def test_version_from_distribution_metadata(monkeypatch):
    import importlib.metadata as im
    from app import _version

    _hide_version_file(monkeypatch)
    seen = []
    monkeypatch.setattr(im, "version", lambda name: seen.append(name) or "1.2.3")

    assert _version.get_version() == "1.2.3"
    assert seen == ["vodbridge"]


def test_version_without_metadata(monkeypatch):
    import importlib.metadata as im
    from app import _version

    _hide_version_file(monkeypatch)

    def _missing(name):
        raise im.PackageNotFoundError(name)

    monkeypatch.setattr(im, "version", _missing)
    assert _version.get_version() == "0.0.0"


def test_health_reports_version(client):
    from app._version import __version__

    assert client.get("/health").json()["version"] == __version__
