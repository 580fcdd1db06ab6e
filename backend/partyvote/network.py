import socket


def get_lan_ip() -> str:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            # No packet is sent; connecting only selects the outbound interface
            sock.connect(("8.8.8.8", 80))
            return sock.getsockname()[0]
    except OSError:
        try:
            return socket.gethostbyname(socket.gethostname())
        except OSError:
            return "127.0.0.1"


def resolve_public_url(config) -> str:
    """Address players use to reach this server (shown as a QR code by the host)."""
    explicit = (config.get('PUBLIC_URL') or '').strip()
    if explicit:
        return explicit.rstrip('/')
    port = int(config.get('PORT', 3000))
    ip = get_lan_ip()
    if ip.startswith('127.'):
        return f"http://localhost:{port}"
    return f"http://{ip}:{port}"
