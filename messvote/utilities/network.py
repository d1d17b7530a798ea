"""Network helpers used when announcing where the API is reachable."""
import socket


def get_local_ip() -> str:
    """Return a non-loopback local IP address if possible, otherwise '127.0.0.1'.

    A UDP socket asks the OS which interface would reach a public address;
    nothing is sent on the wire.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("8.8.8.8", 80))
        ip = str(s.getsockname()[0])
    except OSError:
        ip = "127.0.0.1"
    finally:
        s.close()
    return ip


def server_urls(host: str, port: int) -> list:
    """URLs to show at startup: localhost, plus the LAN address when bound to all interfaces."""
    urls = [f"http://localhost:{port}"]
    if host in ("0.0.0.0", ""):
        local_ip = get_local_ip()
        if local_ip not in ("127.0.0.1", "localhost"):
            urls.append(f"http://{local_ip}:{port}")
    elif host not in ("127.0.0.1", "localhost"):
        urls.append(f"http://{host}:{port}")
    return urls
