# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

ROUTES = {
    "/home": 200,
    "/healthz": 200,
    "/index": 200,
    "/will-fail": 400,
    "/created": 201,
}

# Paths under /delayed answer 200 after DELAYED_SECONDS.
DELAYED_PREFIX = "/delayed"
DELAYED_SECONDS = 0.6

# /slow-drip sends the status line at once, then one header every DRIP_INTERVAL
# seconds for DRIP_SECONDS, so no single read ever waits long.
SLOW_DRIP_PATH = "/slow-drip"
DRIP_INTERVAL = 0.2
DRIP_SECONDS = 4.0


class _RouteHandler(BaseHTTPRequestHandler):
    def _respond(self):
        if self.path == SLOW_DRIP_PATH:
            self._drip()
            return
        if self.path.startswith(DELAYED_PREFIX):
            time.sleep(DELAYED_SECONDS)
            status = 200
        else:
            status = ROUTES.get(self.path, 404)
        self.send_response(status)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _drip(self):
        # send_header buffers until end_headers, so write the raw lines.
        try:
            self.wfile.write(b"HTTP/1.1 200 OK\r\n")
            self.wfile.flush()
            deadline = time.monotonic() + DRIP_SECONDS
            count = 0
            while time.monotonic() < deadline:
                time.sleep(DRIP_INTERVAL)
                self.wfile.write(f"X-Drip-{count}: .\r\n".encode("ascii"))
                self.wfile.flush()
                count += 1
            self.wfile.write(b"Content-Length: 0\r\n\r\n")
            self.wfile.flush()
        except OSError:
            return
        self.close_connection = True

    do_GET = _respond
    do_POST = _respond
    do_PUT = _respond
    do_DELETE = _respond
    do_PATCH = _respond
    do_HEAD = _respond

    def log_message(self, *_args):
        return None


class _RouteServer(ThreadingHTTPServer):
    # Accept a burst of simultaneous connects without the default backlog of 5.
    request_queue_size = 256


@pytest.fixture
def live_server():
    server = _RouteServer(("127.0.0.1", 0), _RouteHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def closed_port_url():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}"
