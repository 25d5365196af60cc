import ipaddress

import pytest

from rbacmodel.ipparser import (
    CIDR,
    IP,
    IPNet,
    ParserError,
    V4_IN_V6_PREFIX,
    cidr_mask,
    ipv4,
    parse_cidr,
    parse_ip,
    parse_ipv4,
    parse_ipv6,
)


@pytest.mark.parametrize("text", ["192.168.1.1", "0.0.0.0", "255.255.255.255", "10.0.0.7"])
def test_parse_ipv4_matches_stdlib(text):
    ip = parse_ipv4(text)
    assert ip.ip == V4_IN_V6_PREFIX + ipaddress.IPv4Address(text).packed
    assert str(ip) == text


@pytest.mark.parametrize(
    "text", ["", "256.1.1.1", "1.2.3", "1.2.3.4.5", "1..2.3", "a.b.c.d", "1.2.3.4 "]
)
def test_parse_ipv4_rejects(text):
    assert parse_ipv4(text) is None


@pytest.mark.parametrize(
    "text",
    ["::", "::1", "2001:db8::1", "fe80::1:2:3", "1:2:3:4:5:6:7:8", "::ffff:1.2.3.4", "1::", "ABCD::ef"],
)
def test_parse_ipv6_matches_stdlib(text):
    ip = parse_ipv6(text)
    assert ip.ip == ipaddress.IPv6Address(text).packed


@pytest.mark.parametrize(
    "text",
    ["1:2:3:4:5:6:7", "1::2::3", "1:2:3:4:5:6:7:8:9", "12345::", "1:", ":1", "1:2:3:4:5:6:7:8::", "g::1"],
)
def test_parse_ipv6_rejects(text):
    assert parse_ipv6(text) is None


def test_parse_ip_dispatches():
    assert parse_ip("1.2.3.4") == ipv4(1, 2, 3, 4)
    assert parse_ip("::1").ip == ipaddress.IPv6Address("::1").packed
    assert parse_ip("nothing") is None


def test_embedded_ipv4_equals_ipv4():
    assert parse_ipv6("::ffff:1.2.3.4") == ipv4(1, 2, 3, 4)


def test_to4_and_equal():
    ip = ipv4(10, 1, 2, 3)
    short = ip.to4()
    assert short.ip == bytes((10, 1, 2, 3))
    assert short.to4() is short
    assert ip.equal(short)
    assert short.equal(ip)
    assert not short.equal(ipv4(10, 1, 2, 4))
    assert parse_ipv6("2001:db8::1").to4() is None
    assert not parse_ipv6("2001:db8::1").equal(short)


@pytest.mark.parametrize("ones,bits", [(0, 32), (8, 32), (24, 32), (31, 32), (32, 32), (64, 128), (127, 128)])
def test_cidr_mask_matches_stdlib(ones, bits):
    net = ipaddress.ip_network(f"{'0.0.0.0' if bits == 32 else '::'}/{ones}")
    assert cidr_mask(ones, bits) == net.netmask.packed


@pytest.mark.parametrize("ones,bits", [(-1, 32), (33, 32), (8, 16), (129, 128)])
def test_cidr_mask_rejects(ones, bits):
    with pytest.raises(ValueError):
        cidr_mask(ones, bits)


def test_mask_sizes():
    ip = ipv4(192, 168, 1, 77)
    masked = ip.mask(cidr_mask(24, 32))
    assert masked.ip == bytes((192, 168, 1, 0))
    assert IP(bytes((1, 2, 3, 4))).mask(cidr_mask(24, 128)) is None
    assert parse_ipv6("2001:db8::1").mask(cidr_mask(8, 32)) is None


@pytest.mark.parametrize("text", ["192.168.1.0/24", "10.1.2.3/8", "2001:db8::/32", "fe80::1/64", "1.2.3.4/32"])
def test_parse_cidr_network_matches_stdlib(text):
    cidr = parse_cidr(text)
    expected = ipaddress.ip_network(text, strict=False)
    assert cidr.net.ip.ip == expected.network_address.packed
    assert cidr.net.mask == expected.netmask.packed
    assert isinstance(cidr, CIDR)


@pytest.mark.parametrize(
    "network,address",
    [
        ("192.168.1.0/24", "192.168.1.5"),
        ("192.168.1.0/24", "192.168.2.1"),
        ("10.0.0.0/8", "10.255.0.1"),
        ("10.0.0.0/8", "11.0.0.1"),
        ("2001:db8::/32", "2001:db8::1"),
        ("2001:db8::/32", "2001:db9::1"),
        ("192.168.1.0/24", "::1"),
    ],
)
def test_contains_matches_stdlib(network, address):
    cidr = parse_cidr(network)
    expected = ipaddress.ip_address(address) in ipaddress.ip_network(network, strict=False)
    assert cidr.net.contains(parse_ip(address)) is expected


@pytest.mark.parametrize("text", ["1.2.3.4", "1.2.3.4/33", "1.2.3.4/x", "1.2.3.4/", "nope/8", "::1/129", "1.2.3.4/8a"])
def test_parse_cidr_rejects(text):
    with pytest.raises(ParserError):
        parse_cidr(text)


def test_network_and_mask_inconsistent():
    net = IPNet(ip=IP(bytes((1, 2, 3))), mask=cidr_mask(8, 32))
    assert net.network_and_mask() is None
    assert net.contains(ipv4(1, 2, 3, 4)) is False


def test_network_and_mask_trims_long_mask():
    net = IPNet(ip=IP(bytes((10, 0, 0, 0))), mask=b"\xff" * 12 + cidr_mask(8, 32))
    ip, mask = net.network_and_mask()
    assert ip.ip == bytes((10, 0, 0, 0))
    assert mask == cidr_mask(8, 32)
    assert net.contains(ipv4(10, 9, 9, 9))