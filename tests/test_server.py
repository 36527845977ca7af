from videoshare import server
from videoshare.config import get_settings


class UnreachableSocket:
    def __init__(self, *args):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def connect(self, address):
        raise OSError("network is unreachable")


class LoopbackSocket(UnreachableSocket):
    def connect(self, address):
        pass

    def getsockname(self):
        return ("127.0.0.1", 54321)


class LanSocket(LoopbackSocket):
    def getsockname(self):
        return ("192.168.1.20", 54321)


def test_main_passes_cli_overrides_to_app_and_uvicorn(tmp_path, monkeypatch):
    monkeypatch.setenv("VIDEOSHARE_PORT", "4000")
    get_settings.cache_clear()

    created = {}
    runs = {}

    def fake_create_app(settings):
        created["settings"] = settings
        return "app"

    def fake_run(app, **kwargs):
        runs["app"] = app
        runs.update(kwargs)

    monkeypatch.setattr(server, "create_app", fake_create_app)
    monkeypatch.setattr(server.uvicorn, "run", fake_run)
    monkeypatch.setattr(server, "get_local_ip", lambda: "localhost")

    server.main(["--host", "127.0.0.1", "--storage-dir", str(tmp_path), "--log-level", "debug"])

    settings = created["settings"]
    assert settings.host == "127.0.0.1"
    assert settings.port == 4000
    assert settings.storage_dir == str(tmp_path)
    assert settings.log_level == "debug"
    assert runs == {"app": "app", "host": "127.0.0.1", "port": 4000, "log_level": "debug"}
    get_settings.cache_clear()


def test_get_local_ip_falls_back_when_network_unreachable(monkeypatch):
    monkeypatch.setattr(server.socket, "socket", UnreachableSocket)
    assert server.get_local_ip() == "localhost"


def test_get_local_ip_hides_loopback(monkeypatch):
    monkeypatch.setattr(server.socket, "socket", LoopbackSocket)
    assert server.get_local_ip() == "localhost"


def test_get_local_ip_returns_lan_address(monkeypatch):
    monkeypatch.setattr(server.socket, "socket", LanSocket)
    assert server.get_local_ip() == "192.168.1.20"
