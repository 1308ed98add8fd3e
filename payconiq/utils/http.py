from typing import Optional
import httpx

DEFAULT_TIMEOUT_SEC = 20
DEFAULT_CONNECT_TIMEOUT_SEC = 20

def client(
    timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    connect_timeout_sec: float = DEFAULT_CONNECT_TIMEOUT_SEC,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    # httpx bounds each connect/read/write/pool step, not the request as a whole;
    # a server trickling bytes can keep a call alive past timeout_sec.
    return httpx.Client(
        timeout=httpx.Timeout(timeout_sec, connect=connect_timeout_sec),
        transport=transport,
    )
