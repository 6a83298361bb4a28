"""
網路服務：來源 IP 與區網位址

職責：
1. 取得呼叫者 IP（同時是「一個 IP 一位玩家」的身分鍵）
2. 列出本機的區網 IPv4 位址，啟動時顯示給主持人分享網址（僅供顯示）
"""
import socket
from typing import List

from fastapi import Request

UNKNOWN_ADDRESS = "unknown"


def get_client_ip(request: Request) -> str:
    """
    取得呼叫者 IP

    優先順序：
    1. X-Forwarded-For 的第一個位址（經過 proxy 時）
    2. socket 連線的對方位址
    3. 都沒有時返回 "unknown"
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_ADDRESS


def _outbound_ip() -> str:
    # UDP connect 不會送出封包，只是讓 OS 選出對外路由
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("8.8.8.8", 80))
        return sock.getsockname()[0]
    finally:
        sock.close()


def get_local_ips() -> List[str]:
    """
    本機非 loopback 的 IPv4 位址

    返回：
        位址列表（去除 127.x 與重複，保留發現順序）
    """
    candidates: List[str] = []
    try:
        candidates.append(_outbound_ip())
    except OSError:
        pass
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
        candidates.extend(info[4][0] for info in infos)
    except OSError:
        pass

    results: List[str] = []
    for ip in candidates:
        if ip.startswith("127.") or ip in results:
            continue
        results.append(ip)
    return results
