import pytest

from read_tools_server.auth.client_ip import is_public_ip, resolve_client_ip


@pytest.mark.parametrize(
    "candidate, expected",
    [
        ("8.8.8.8", True),
        ("2001:4860:4860::8888", True),
        ("10.0.0.1", False),
        ("192.168.1.20", False),
        ("127.0.0.1", False),
        ("169.254.0.1", False),
        ("not-an-ip", False),
        ("", False),
    ],
)
def test_is_public_ip(candidate, expected):
    assert is_public_ip(candidate) is expected


def test_cloudflare_header_wins():
    headers = {
        "cf-connecting-ip": "1.1.1.1",
        "x-forwarded-for": "8.8.8.8",
    }
    assert resolve_client_ip(headers, "9.9.9.9") == "1.1.1.1"


def test_first_forwarded_entry_is_client():
    headers = {"x-forwarded-for": "8.8.8.8, 10.0.0.1, 172.16.0.1"}
    assert resolve_client_ip(headers) == "8.8.8.8"


def test_private_header_falls_through_to_next_source():
    headers = {
        "x-forwarded-for": "10.0.0.5",
        "x-real-ip": "8.8.4.4",
    }
    assert resolve_client_ip(headers) == "8.8.4.4"


def test_peer_address_is_last_resort():
    assert resolve_client_ip({}, "9.9.9.9") == "9.9.9.9"


def test_unknown_identity_when_nothing_usable():
    headers = {"x-forwarded-for": "garbage"}
    assert resolve_client_ip(headers, "127.0.0.1") is None
