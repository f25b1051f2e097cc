"""Addresses announced by ``trip.main`` when the API starts."""
import socket
from typing import List

LOOPBACK = ("127.0.0.1", "localhost", "::1")


def lan_address(route_host: str = "8.8.8.8") -> str:
    """Address of the interface the OS would route ``route_host`` through.

    Connecting a UDP socket sends nothing. Falls back to 127.0.0.1 offline.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        try:
            s.connect((route_host, 80))
            return str(s.getsockname()[0])
        except OSError:
            return "127.0.0.1"


def announce_urls(host: str, port: int, lan_ip: str = None) -> List[str]:
    """URLs other devices can use to reach the sync API.

    A loopback bind is only reachable locally, so only localhost is listed.
    """
    urls = [f"http://localhost:{port}"]
    if host in LOOPBACK:
        return urls
    ip = host if host not in ("0.0.0.0", "") else (lan_ip or lan_address())
    if ip not in LOOPBACK:
        urls.append(f"http://{ip}:{port}")
    return urls


__all__ = ['lan_address', 'announce_urls']
