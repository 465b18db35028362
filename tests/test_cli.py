# tests/test_cli.py
import socket

import pytest

from ttlsort import cli
from ttlsort.errors import SetupError
from ttlsort.prober.fake import FakeProber

from packets import DEST, time_exceeded


def test_argparser_defaults():
    args = cli.build_argparser().parse_args(["5", "3", "9"])
    s = cli.settings_from_args(args)
    assert args.values == [5, 3, 9]
    assert s.target == "www.baidu.com"
    assert s.max_rounds == 3
    assert s.chill_s == 3
    assert s.read_timeout_s == 10
    assert s.strict_icmp
    assert not s.verbose


def test_argparser_flags():
    args = cli.build_argparser().parse_args(
        ["--target", "example.com", "--iters", "7", "--chill", "1", "--lenient", "-v", "4"])
    s = cli.settings_from_args(args)
    assert s.target == "example.com"
    assert s.max_rounds == 7
    assert not s.strict_icmp
    assert s.verbose


def test_malformed_integer_exits():
    with pytest.raises(SystemExit):
        cli.main(["4", "four"])


def test_out_of_range_value_exits():
    with pytest.raises(SystemExit):
        cli.main(["4", "300"])


def test_resolve_target_picks_first_ipv4(monkeypatch):
    def fake_getaddrinfo(host, port, family):
        assert family == socket.AF_INET
        return [(socket.AF_INET, socket.SOCK_RAW, 0, "", ("93.184.216.34", 0)),
                (socket.AF_INET, socket.SOCK_RAW, 0, "", ("93.184.216.35", 0))]
    monkeypatch.setattr(cli.socket, "getaddrinfo", fake_getaddrinfo)
    assert cli.resolve_target("example.com") == "93.184.216.34"


def test_resolve_target_failure_is_setup_error(monkeypatch):
    def fake_getaddrinfo(host, port, family):
        raise socket.gaierror(-2, "Name or service not known")
    monkeypatch.setattr(cli.socket, "getaddrinfo", fake_getaddrinfo)
    with pytest.raises(SetupError):
        cli.resolve_target("nowhere.invalid")


def test_main_sorts_with_fake_prober(monkeypatch):
    monkeypatch.setattr(cli, "resolve_target", lambda host: DEST)
    script = [time_exceeded("10.0.0.1", 1), time_exceeded("10.0.0.2", 2),
              time_exceeded("10.0.0.3", 3)]
    fake = FakeProber(script=script)
    assert cli.main(["--chill", "0", "3", "1", "2"], prober=fake) == 0


def test_main_returns_1_on_setup_error(monkeypatch):
    monkeypatch.setattr(cli, "resolve_target", lambda host: DEST)
    assert cli.main(["--chill", "0", "1"], prober=FakeProber(fail_open=True)) == 1


def test_main_returns_1_when_capture_fails(monkeypatch):
    monkeypatch.setattr(cli, "resolve_target", lambda host: DEST)
    fake = FakeProber(fail_capture=SetupError("ICMP capture failed: Network is down"))
    assert cli.main(["--chill", "0", "1", "2"], prober=fake) == 1
