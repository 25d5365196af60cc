"""Parsing of IPv4/IPv6 addresses and CIDR networks."""

from __future__ import annotations

from dataclasses import dataclass

IPV4_LEN = 4
IPV6_LEN = 16

# Prefix of an IPv4 address stored in 16-byte form.
V4_IN_V6_PREFIX = bytes(10) + b"\xff\xff"

# Upper bound for numbers read while parsing; anything at or above overflows.
_BIG = 0xFFFFFF


class ParserError(ValueError):
    """Raised when an address or network cannot be parsed."""


@dataclass(frozen=True)
class IP:
    """An IP address held as 4 or 16 raw bytes."""

    ip: bytes

    def mask(self, mask: bytes) -> IP | None:
        """Return the address masked with ``mask``, or None if the sizes do not fit."""
        mask = bytes(mask)
        ip = self.ip
        if len(mask) == IPV6_LEN and len(ip) == IPV4_LEN and all(b == 0xFF for b in mask[:12]):
            mask = mask[12:]
        if len(mask) == IPV4_LEN and len(ip) == IPV6_LEN and ip[:12] == V4_IN_V6_PREFIX:
            ip = ip[12:]
        if len(ip) != len(mask):
            return None
        return IP(bytes(a & b for a, b in zip(ip, mask)))

    def equal(self, other: IP) -> bool:
        """Report whether two addresses are the same, across 4- and 16-byte forms."""
        if len(self.ip) == len(other.ip):
            return self.ip == other.ip
        if len(self.ip) == IPV4_LEN and len(other.ip) == IPV6_LEN:
            return other.ip[:12] == V4_IN_V6_PREFIX and self.ip == other.ip[12:]
        if len(self.ip) == IPV6_LEN and len(other.ip) == IPV4_LEN:
            return self.ip[:12] == V4_IN_V6_PREFIX and self.ip[12:] == other.ip
        return False

    def to4(self) -> IP | None:
        """Return the 4-byte form of an IPv4 address, or None if it is not one."""
        if len(self.ip) == IPV4_LEN:
            return self
        if len(self.ip) == IPV6_LEN and self.ip[:12] == V4_IN_V6_PREFIX:
            return IP(self.ip[12:])
        return None

    def __str__(self) -> str:
        v4 = self.to4()
        if v4 is not None:
            return ".".join(str(b) for b in v4.ip)
        return ":".join(
            f"{(self.ip[k] << 8) | self.ip[k + 1]:x}" for k in range(0, len(self.ip) - 1, 2)
        )


@dataclass(frozen=True)
class IPNet:
    """A network: a network address together with its mask."""

    ip: IP
    mask: bytes

    def network_and_mask(self) -> tuple[IP, bytes] | None:
        """Return the network number and mask in matching sizes, or None if inconsistent."""
        ip = self.ip.to4()
        if ip is None:
            ip = self.ip
            if len(ip.ip) != IPV6_LEN:
                return None
        mask = bytes(self.mask)
        if len(mask) == IPV4_LEN:
            if len(ip.ip) != IPV4_LEN:
                return None
        elif len(mask) == IPV6_LEN:
            if len(ip.ip) == IPV4_LEN:
                mask = mask[12:]
        else:
            return None
        return ip, mask

    def contains(self, ip: IP) -> bool:
        """Report whether the network includes ``ip``."""
        found = self.network_and_mask()
        if found is None:
            return False
        network, mask = found
        v4 = ip.to4()
        if v4 is not None:
            ip = v4
        if len(ip.ip) != len(network.ip):
            return False
        return all((n & m) == (a & m) for n, a, m in zip(network.ip, ip.ip, mask))


@dataclass(frozen=True)
class CIDR:
    """A parsed CIDR string: the address given and the network it lies in."""

    ip: IP
    net: IPNet


def cidr_mask(ones: int, bits: int) -> bytes:
    """Return a mask of ``ones`` leading 1 bits out of ``bits`` (32 or 128)."""
    if bits not in (8 * IPV4_LEN, 8 * IPV6_LEN):
        raise ValueError(f"mask length must be 32 or 128 bits, not {bits}")
    if ones < 0 or ones > bits:
        raise ValueError(f"number of ones {ones} out of range for {bits} bits")
    out = bytearray()
    n = ones
    for _ in range(bits // 8):
        if n >= 8:
            out.append(0xFF)
            n -= 8
        else:
            out.append(0xFF ^ (0xFF >> n))
            n = 0
    return bytes(out)


def ipv4(a: int, b: int, c: int, d: int) -> IP:
    """Return the 16-byte form of the IPv4 address a.b.c.d."""
    return IP(V4_IN_V6_PREFIX + bytes((a, b, c, d)))


def _dtoi(s: str) -> tuple[int, int] | None:
    """Read a decimal number at the start of ``s``: (value, chars consumed)."""
    n = 0
    i = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + (ord(ch) - ord("0"))
        if n >= _BIG:
            return None
        i += 1
    if i == 0:
        return None
    return n, i


def _xtoi(s: str) -> tuple[int, int] | None:
    """Read a hexadecimal number at the start of ``s``: (value, chars consumed)."""
    n = 0
    i = 0
    for ch in s:
        if ch not in "0123456789abcdefABCDEF":
            break
        n = n * 16 + int(ch, 16)
        if n >= _BIG:
            return None
        i += 1
    if i == 0:
        return None
    return n, i


def parse_ipv4(s: str) -> IP | None:
    """Parse a dotted-decimal IPv4 address, or return None."""
    octets = []
    for i in range(IPV4_LEN):
        if not s:
            return None
        if i > 0:
            if s[0] != ".":
                return None
            s = s[1:]
        found = _dtoi(s)
        if found is None or found[0] > 0xFF:
            return None
        value, used = found
        s = s[used:]
        octets.append(value)
    if s:
        return None
    return ipv4(*octets)


def parse_ipv6(s: str) -> IP | None:
    """Parse an IPv6 address, with optional '::' and trailing IPv4 part, or return None."""
    buf = bytearray(IPV6_LEN)
    ellipsis = -1

    if s.startswith("::"):
        ellipsis = 0
        s = s[2:]
        if not s:
            return IP(bytes(buf))

    i = 0
    while i < IPV6_LEN:
        found = _xtoi(s)
        if found is None or found[0] > 0xFFFF:
            return None
        value, used = found

        if used < len(s) and s[used] == ".":
            if ellipsis < 0 and i != IPV6_LEN - IPV4_LEN:
                return None
            if i + IPV4_LEN > IPV6_LEN:
                return None
            ip4 = parse_ipv4(s)
            if ip4 is None:
                return None
            buf[i:i + IPV4_LEN] = ip4.ip[12:]
            s = ""
            i += IPV4_LEN
            break

        buf[i] = (value >> 8) & 0xFF
        buf[i + 1] = value & 0xFF
        i += 2

        s = s[used:]
        if not s:
            break

        if s[0] != ":" or len(s) == 1:
            return None
        s = s[1:]

        if s[0] == ":":
            if ellipsis >= 0:
                return None
            ellipsis = i
            s = s[1:]
            if not s:
                break

    if s:
        return None

    if i < IPV6_LEN:
        if ellipsis < 0:
            return None
        n = IPV6_LEN - i
        buf[ellipsis + n:i + n] = buf[ellipsis:i]
        buf[ellipsis:ellipsis + n] = bytes(n)
    elif ellipsis >= 0:
        return None
    return IP(bytes(buf))


def parse_ip(s: str) -> IP | None:
    """Parse an IPv4 or IPv6 address, or return None."""
    for ch in s:
        if ch == ".":
            return parse_ipv4(s)
        if ch == ":":
            return parse_ipv6(s)
    return None


def parse_cidr(s: str) -> CIDR:
    """Parse a CIDR string such as '192.168.0.0/16'; raise ParserError if illegal."""
    addr, sep, mask = s.partition("/")
    if not sep:
        raise ParserError("Illegal CIDR address.")
    iplen = IPV4_LEN
    ip = parse_ipv4(addr)
    if ip is None:
        iplen = IPV6_LEN
        ip = parse_ipv6(addr)
    found = _dtoi(mask)
    if ip is None or found is None or found[1] != len(mask) or found[0] > 8 * iplen:
        raise ParserError("Illegal CIDR address.")
    m = cidr_mask(found[0], 8 * iplen)
    network = ip.mask(m)
    if network is None:
        raise ParserError("Illegal CIDR address.")
    return CIDR(ip=ip, net=IPNet(ip=network, mask=m))